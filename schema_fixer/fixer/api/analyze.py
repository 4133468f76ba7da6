"""Analyze API endpoint."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from fixer.analyzer.engine import AnalysisEngine
from fixer.analyzer.models import AnalysisReport, DedupMode, ValidationError
from fixer.deps import get_analysis_engine
from fixer.validator.mapper import map_validation_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analyze"])


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    errors: list[ValidationError] | None = Field(
        None,
        description="Mapped validation errors; computed from data and schema when omitted",
    )
    data: dict[str, Any] = Field(default_factory=dict)
    ui_schema: dict[str, Any] = Field(
        default_factory=dict, description="Schema of the fields the UI can edit"
    )
    schema_: dict[str, Any] = Field(
        default_factory=dict,
        alias="schema",
        description="Fully dereferenced validation schema",
    )
    mode: DedupMode | None = None


@router.post("/analyze", response_model=AnalysisReport)
async def analyze(
    body: AnalyzeRequest,
    engine: AnalysisEngine = Depends(get_analysis_engine),
) -> AnalysisReport:
    """Return actionable change suggestions for a set of validation errors."""
    errors = body.errors
    if errors is None:
        if body.schema_:
            errors = map_validation_errors(body.data, body.schema_)
        else:
            errors = []
        logger.info("Validated data against schema: %d errors", len(errors))

    return engine.analyze_actionable(
        errors, body.data, body.ui_schema, body.schema_, dedup_mode=body.mode
    )


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}
