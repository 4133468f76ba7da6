"""Restrict analyses to what the user can actually change in the UI."""

from __future__ import annotations

import logging

from fixer.actionable.dedup import dedupe_by_suggestions, dedupe_missing_fields
from fixer.analyzer.aggregator import collect_missing_fields
from fixer.analyzer.models import (
    FilteredAnalysis,
    GroupedAnalysisResult,
    ValidationAnalysisOutput,
    ValidationError,
)
from fixer.schema.navigator import field_exists_in_schema

logger = logging.getLogger(__name__)


def is_actionable(analysis: GroupedAnalysisResult, ui_schema: dict | None) -> bool:
    """The error field and at least one suggestion must be UI-visible."""
    if not field_exists_in_schema(analysis.error_field, ui_schema):
        return False
    return any(
        field_exists_in_schema(s.field, ui_schema) for s in analysis.suggestions
    )


def filter_unactionable_errors(
    validation_errors: list[ValidationError],
    ui_schema: dict | None,
    analysis_output: ValidationAnalysisOutput,
) -> FilteredAnalysis:
    """Drop errors and suggestions the user cannot act on.

    Suggestions are pruned to UI-visible fields, except nested ones which
    the authoritative schema requires regardless; those that are invisible
    are reported in ``missing_in_flattened_schema``.
    """
    actionable_fields = {
        a.error_field
        for a in analysis_output.analyses
        if is_actionable(a, ui_schema)
    }

    kept_errors = [e for e in validation_errors if e.field_path in actionable_fields]

    kept: list[GroupedAnalysisResult] = []
    sources: list[GroupedAnalysisResult] = []
    for analysis in analysis_output.analyses:
        if analysis.error_field not in actionable_fields:
            continue

        suggestions = [
            s
            for s in analysis.suggestions
            if s.nested or field_exists_in_schema(s.field, ui_schema)
        ]
        if not suggestions:
            continue

        kept.append(analysis.model_copy(update={"suggestions": suggestions}))
        sources.append(analysis)

    missing = dedupe_missing_fields(
        collect_missing_fields(sources, ui_schema), by_error_field=True
    )

    logger.debug(
        "Actionable filter kept %d/%d analyses and %d/%d errors",
        len(kept),
        len(analysis_output.analyses),
        len(kept_errors),
        len(validation_errors),
    )

    return FilteredAnalysis(
        validation_errors=kept_errors,
        analysis_output=ValidationAnalysisOutput(
            analyses=kept,
            missing_in_flattened_schema=missing,
        ),
    )


def filter_and_deduplicate_errors(
    validation_errors: list[ValidationError],
    ui_schema: dict | None,
    analysis_output: ValidationAnalysisOutput,
) -> FilteredAnalysis:
    """Actionable filter plus collapsing of identical suggestion sets."""
    filtered = filter_unactionable_errors(validation_errors, ui_schema, analysis_output)

    analyses, covered = dedupe_by_suggestions(filtered.analysis_output.analyses)
    missing = dedupe_missing_fields(
        filtered.analysis_output.missing_in_flattened_schema, by_error_field=False
    )

    return FilteredAnalysis(
        validation_errors=[
            e for e in filtered.validation_errors if e.field_path in covered
        ],
        analysis_output=ValidationAnalysisOutput(
            analyses=analyses,
            missing_in_flattened_schema=missing,
        ),
    )
