"""Collapse duplicate analysis results."""

from __future__ import annotations

from typing import TypeVar

from fixer.analyzer.models import (
    AnalysisResult,
    GroupedAnalysisResult,
    MissingFieldInfo,
)

R = TypeVar("R", AnalysisResult, GroupedAnalysisResult)


def dedupe_results(results: list[R]) -> list[R]:
    """Keep the first forward and the first reverse result per error field."""
    seen: dict[tuple[str, str], R] = {}
    for result in results:
        seen.setdefault((result.error_field, result.type.value), result)
    return list(seen.values())


def suggestion_signature(analysis: GroupedAnalysisResult) -> str:
    return "|".join(sorted(s.field for s in analysis.suggestions))


def dedupe_by_suggestions(
    analyses: list[GroupedAnalysisResult],
) -> tuple[list[GroupedAnalysisResult], set[str]]:
    """Collapse analyses that suggest the same set of fields.

    Returns the kept analyses and every error field that mapped to a kept
    signature, so the errors behind collapsed analyses stay actionable.
    """
    seen: set[str] = set()
    kept: list[GroupedAnalysisResult] = []
    covered: set[str] = set()

    for analysis in analyses:
        signature = suggestion_signature(analysis)
        if signature not in seen:
            seen.add(signature)
            kept.append(analysis)
        covered.add(analysis.error_field)

    return kept, covered


def dedupe_missing_fields(
    infos: list[MissingFieldInfo],
    by_error_field: bool = True,
) -> list[MissingFieldInfo]:
    """Drop registry entries whose sorted field list was already reported.

    With ``by_error_field`` the error field is part of the signature, so two
    error fields missing the same fields are both kept.
    """
    seen: set[str] = set()
    deduped: list[MissingFieldInfo] = []

    for info in infos:
        fields = ",".join(sorted(info.missing_fields))
        key = f"{info.error_field}:{fields}" if by_error_field else fields
        if key in seen:
            continue
        seen.add(key)
        deduped.append(info)

    return deduped
