"""Shared test fixtures and configuration."""

import os
import sys
from pathlib import Path

# Add schema_fixer/ to Python path so `from fixer.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "schema_fixer"))

import pytest

os.environ["FIXER_DEV_MODE"] = "true"


@pytest.fixture
def ui_schema() -> dict:
    """UI-facing schema: what the form actually renders."""
    return {
        "type": "object",
        "properties": {
            "industry": {
                "type": "string",
                "title": "Industry",
                "enum": ["Associations", "Business Services", "Retail"],
            },
            "segment": {"type": "string", "title": "Class Segment"},
            "employees": {"type": "number", "title": "Employees"},
            "locations": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "city": {"type": "string", "title": "City"},
                    },
                },
            },
        },
    }


@pytest.fixture
def schema() -> dict:
    """Authoritative schema with a dependency on ``industry``."""
    return {
        "type": "object",
        "properties": {
            "industry": {"type": "string"},
            "segment": {"type": "string"},
            "employees": {"type": "number"},
            "locations": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {"city": {"type": "string"}},
                },
            },
        },
        "dependencies": {
            "industry": {
                "oneOf": [
                    {
                        "properties": {
                            "industry": {"enum": ["Associations"]},
                            "segment": {"enum": ["Charity", "Club"]},
                            "employees": {"type": "number"},
                        },
                        "required": ["segment", "employees"],
                    },
                    {
                        "properties": {
                            "industry": {"enum": ["Business Services"]},
                            "segment": {"enum": ["Printing", "Consulting"]},
                        },
                        "required": ["segment"],
                    },
                    {
                        "properties": {
                            "industry": {"enum": ["Retail"]},
                            "segment": {"enum": ["Grocery", "Bakery"]},
                        },
                        "required": ["segment"],
                    },
                ]
            }
        },
    }
