"""Shared FastAPI dependencies."""

from __future__ import annotations

from fixer.analyzer.engine import AnalysisEngine

_analysis_engine: AnalysisEngine | None = None


def get_analysis_engine() -> AnalysisEngine:
    """FastAPI dependency: return the shared AnalysisEngine."""
    assert _analysis_engine is not None, "AnalysisEngine not initialised"
    return _analysis_engine
