"""Turn intermediate results into the labelled output structure."""

from __future__ import annotations

from fixer.analyzer.models import (
    AnalysisResult,
    GroupedAnalysisResult,
    MissingFieldInfo,
    ValidationAnalysisOutput,
)
from fixer.schema.navigator import field_exists_in_schema, get_field_label


def to_grouped(result: AnalysisResult, ui_schema: dict | None) -> GroupedAnalysisResult:
    return GroupedAnalysisResult(
        trigger_field=result.trigger_field,
        trigger_value=result.trigger_value,
        trigger_field_label=(
            get_field_label(result.trigger_field, ui_schema)
            if result.trigger_field
            else None
        ),
        error_field=result.error_field,
        error_field_label=get_field_label(result.error_field, ui_schema),
        error_field_current_value=result.current_value,
        suggestions=result.suggestions,
        type=result.type,
    )


def collect_missing_fields(
    results: list[AnalysisResult] | list[GroupedAnalysisResult],
    ui_schema: dict | None,
) -> list[MissingFieldInfo]:
    """Group suggested fields the UI schema lacks by their error field."""
    by_error: dict[str, dict[str, None]] = {}
    for result in results:
        for suggestion in result.suggestions:
            if not field_exists_in_schema(suggestion.field, ui_schema):
                by_error.setdefault(result.error_field, {})[suggestion.field] = None

    return [
        MissingFieldInfo(error_field=error_field, missing_fields=list(fields))
        for error_field, fields in by_error.items()
    ]


def aggregate_results(
    results: list[AnalysisResult],
    ui_schema: dict | None,
) -> ValidationAnalysisOutput:
    """Label, tag and assemble the final output."""
    return ValidationAnalysisOutput(
        analyses=[to_grouped(result, ui_schema) for result in results],
        missing_in_flattened_schema=collect_missing_fields(results, ui_schema),
    )
