"""FastAPI application -- Schema Fixer entrypoint."""

from __future__ import annotations

import json
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI

import fixer.deps as deps
from fixer.analyzer.engine import AnalysisEngine
from fixer.analyzer.models import DedupMode

logger = logging.getLogger(__name__)


def _load_options() -> dict:
    """Load options from /data/options.json or env fallback."""
    opts_path = os.environ.get("FIXER_OPTIONS_PATH", "/data/options.json")
    if Path(opts_path).exists():
        return json.loads(Path(opts_path).read_text())
    return {
        "dedup_mode": os.environ.get("FIXER_DEDUP_MODE", DedupMode.basic.value),
    }


def _dedup_mode(options: dict) -> DedupMode:
    value = options.get("dedup_mode", DedupMode.basic.value)
    try:
        return DedupMode(value)
    except ValueError:
        logger.warning("Unknown dedup_mode %r, using %s", value, DedupMode.basic.value)
        return DedupMode.basic


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: init the engine on startup, drop it on shutdown."""
    log_level = logging.DEBUG if os.environ.get("FIXER_DEV_MODE") else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    options = _load_options()
    logger.info("Schema Fixer starting with options: %s", options)

    deps._analysis_engine = AnalysisEngine(dedup_mode=_dedup_mode(options))
    logger.info("Analysis engine ready (dedup mode: %s)", deps._analysis_engine.dedup_mode.value)

    yield

    deps._analysis_engine = None


app = FastAPI(
    title="Schema Fixer",
    version="0.1.0",
    lifespan=lifespan,
)

from fixer.api.analyze import router as analyze_router

app.include_router(analyze_router)
