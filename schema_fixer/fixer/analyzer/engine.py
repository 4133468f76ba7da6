"""Analysis engine: validation errors in, change suggestions out.

Pipeline per call:
1. Refuse schemas that are empty or still contain ``$ref`` markers.
2. For each error, resolve forward (what the active branch requires) and
   reverse (which trigger values would accept the current value) results.
3. Keep one forward and one reverse result per error field.
4. Attach labels and tag each result ``dependency`` or ``simple``.

The actionable pass (``fixer.actionable``) then narrows the output to
fields the user can edit.
"""

from __future__ import annotations

import logging
from typing import Any

from fixer.actionable.dedup import dedupe_results
from fixer.actionable.filters import (
    filter_and_deduplicate_errors,
    filter_unactionable_errors,
)
from fixer.analyzer.aggregator import aggregate_results
from fixer.analyzer.extractor import (
    find_dependency_field,
    get_parent_path,
    is_array_constraint,
)
from fixer.analyzer.forward import (
    check_nested_required_fields,
    current_value_of,
    dependencies_of,
    find_all_required_fields,
    select_branch,
)
from fixer.analyzer.models import (
    AnalysisReport,
    AnalysisResult,
    DedupMode,
    Suggestion,
    ValidationAnalysisOutput,
    ValidationError,
)
from fixer.analyzer.reverse import (
    find_array_constraint_alternatives,
    find_reverse_dependencies,
)
from fixer.schema.navigator import (
    MISSING,
    get_nested_value,
    get_schema_for_path,
    join_path,
    split_path,
)
from fixer.schema.refs import check_schema

logger = logging.getLogger(__name__)


def _without_self(suggestions: list[Suggestion], error_field: str) -> list[Suggestion]:
    return [s for s in suggestions if s.field != error_field]


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _analyze_array_constraint(
    error: ValidationError,
    current_value: Any,
    data: Any,
    ui_schema: dict | None,
    schema: dict,
) -> list[AnalysisResult]:
    """Handle a length limit failing inside a dependency branch.

    Walks up from the error field to the nearest ancestor carrying
    dependency rules and inspects its active branch.
    """
    field_path = error.field_path
    parts = split_path(field_path)

    for depth in range(len(parts) - 1, -1, -1):
        ancestor_path = ".".join(parts[:depth])
        rules = dependencies_of(get_schema_for_path(schema, ancestor_path))
        if not rules:
            continue

        ancestor_data = _as_dict(
            get_nested_value(data, ancestor_path) if ancestor_path else data
        )

        for trigger, rule in rules.items():
            if trigger not in ancestor_data:
                continue
            trigger_value = ancestor_data[trigger]
            branch = select_branch(rule, trigger, trigger_value)
            if branch is None:
                continue

            trigger_path = join_path(ancestor_path, trigger)
            results: list[AnalysisResult] = []

            forward: list[Suggestion] = []
            for name, prop in (branch.get("properties") or {}).items():
                if name == trigger or not isinstance(prop, dict):
                    continue
                forward.extend(
                    check_nested_required_fields(
                        prop, join_path(ancestor_path, name), ancestor_data.get(name)
                    )
                )
            forward = _without_self(forward, field_path)
            if forward:
                results.append(
                    AnalysisResult(
                        trigger_field=trigger_path,
                        trigger_value=current_value_of(trigger_value),
                        error_field=field_path,
                        current_value=current_value_of(current_value),
                        suggestions=forward,
                    )
                )

            relative_path = ".".join(parts[depth:])
            length = len(current_value) if isinstance(current_value, list) else 0
            reverse = find_array_constraint_alternatives(
                ui_schema, rule, trigger, trigger_path, trigger_value,
                relative_path, length,
            )
            reverse = _without_self(reverse, field_path)
            if reverse:
                results.append(
                    AnalysisResult(
                        error_field=field_path,
                        current_value=current_value_of(current_value),
                        suggestions=reverse,
                    )
                )

            if results:
                return results

    return []


def analyze_dependency_error(
    error: ValidationError,
    data: Any,
    ui_schema: dict | None,
    schema: dict,
) -> list[AnalysisResult]:
    """Analyze a single error; at most one forward and one reverse result."""
    field_path = error.field_path
    locator = error.constraint_locator
    current_value = get_nested_value(data, field_path, MISSING)

    if is_array_constraint(locator):
        results = _analyze_array_constraint(
            error, current_value, data, ui_schema, schema
        )
        if results:
            return results

    trigger = find_dependency_field(locator)
    if trigger is None:
        return []

    parent_path = get_parent_path(field_path)
    parent_data = get_nested_value(data, parent_path) if parent_path else data
    parent_schema = get_schema_for_path(schema, parent_path)

    if trigger in dependencies_of(parent_schema):
        governing_schema = parent_schema
        governing_path = parent_path
        governing_data = parent_data
    else:
        # The locator can name a property whose own schema declares the rules.
        properties = _as_dict(_as_dict(parent_schema).get("properties"))
        governing_schema = properties.get(trigger)
        if not dependencies_of(governing_schema):
            return []
        governing_path = join_path(parent_path, trigger)
        governing_data = _as_dict(parent_data).get(trigger)

    results: list[AnalysisResult] = []

    forward = _without_self(
        find_all_required_fields(governing_schema, governing_data, governing_path),
        field_path,
    )
    if forward:
        results.append(
            AnalysisResult(
                trigger_field=join_path(parent_path, trigger),
                trigger_value=current_value_of(_as_dict(parent_data).get(trigger)),
                error_field=field_path,
                current_value=current_value_of(current_value),
                suggestions=forward,
            )
        )

    reverse = _without_self(
        find_reverse_dependencies(
            ui_schema,
            field_path,
            current_value,
            governing_schema,
            governing_path,
            governing_data,
        ),
        field_path,
    )
    if reverse:
        results.append(
            AnalysisResult(
                error_field=field_path,
                current_value=current_value_of(current_value),
                suggestions=reverse,
            )
        )

    return results


def analyze_with_warnings(
    validation_errors: list[ValidationError],
    data: Any,
    ui_schema: dict | None,
    schema: dict | None,
) -> tuple[ValidationAnalysisOutput, list[str]]:
    """Analyze all errors against a fully dereferenced schema.

    Returns the output together with the schema problems found. When the
    schema is empty or contains ``$ref`` markers the output is empty and no
    error is looked at.
    """
    problems = check_schema(schema)
    if problems:
        for problem in problems:
            logger.warning("Schema error: %s", problem)
        logger.warning("Aborting analysis of %d validation errors", len(validation_errors))
        return ValidationAnalysisOutput(), problems

    results: list[AnalysisResult] = []
    for error in validation_errors:
        error_results = analyze_dependency_error(error, data, ui_schema, schema)
        logger.debug(
            "Error at %s produced %d result(s)", error.field_path, len(error_results)
        )
        results.extend(error_results)

    deduped = dedupe_results(results)
    output = aggregate_results(deduped, ui_schema)

    logger.info(
        "Analyzed %d validation errors into %d analyses (%d missing-field entries)",
        len(validation_errors),
        len(output.analyses),
        len(output.missing_in_flattened_schema),
    )
    return output, problems


def analyze_validation_errors(
    validation_errors: list[ValidationError],
    data: Any,
    ui_schema: dict | None,
    schema: dict | None,
) -> ValidationAnalysisOutput:
    """Analysis output only; see ``analyze_with_warnings``."""
    output, _ = analyze_with_warnings(validation_errors, data, ui_schema, schema)
    return output


class AnalysisEngine:
    """Runs the analysis and the actionable pass with a fixed dedup mode."""

    def __init__(self, dedup_mode: DedupMode = DedupMode.basic) -> None:
        self._dedup_mode = dedup_mode

    @property
    def dedup_mode(self) -> DedupMode:
        return self._dedup_mode

    def analyze(
        self,
        validation_errors: list[ValidationError],
        data: Any,
        ui_schema: dict | None,
        schema: dict | None,
    ) -> ValidationAnalysisOutput:
        """Full analysis output, before the actionable pass."""
        return analyze_validation_errors(validation_errors, data, ui_schema, schema)

    def analyze_actionable(
        self,
        validation_errors: list[ValidationError],
        data: Any,
        ui_schema: dict | None,
        schema: dict | None,
        dedup_mode: DedupMode | None = None,
    ) -> AnalysisReport:
        """Analyze, then keep only what the user can act on."""
        output, warnings = analyze_with_warnings(
            validation_errors, data, ui_schema, schema
        )

        mode = dedup_mode or self._dedup_mode
        if mode == DedupMode.enhanced:
            filtered = filter_and_deduplicate_errors(validation_errors, ui_schema, output)
        else:
            filtered = filter_unactionable_errors(validation_errors, ui_schema, output)

        return AnalysisReport(
            validation_errors=filtered.validation_errors,
            analysis_output=filtered.analysis_output,
            warnings=warnings,
        )
