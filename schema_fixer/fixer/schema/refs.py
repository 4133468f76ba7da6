"""Structural checks the analyzer requires of the authoritative schema."""

from __future__ import annotations

from typing import Any

REF_KEY = "$ref"


def count_refs(node: Any) -> int:
    """Count ``$ref`` markers anywhere in a schema document."""
    if isinstance(node, dict):
        count = 1 if isinstance(node.get(REF_KEY), str) else 0
        return count + sum(count_refs(value) for value in node.values())
    if isinstance(node, list):
        return sum(count_refs(item) for item in node)
    return 0


def has_refs(node: Any) -> bool:
    return count_refs(node) > 0


def check_schema(schema: Any) -> list[str]:
    """Return the reasons the analyzer must not run on this schema.

    An empty list means the schema is usable.
    """
    if not isinstance(schema, dict) or not schema:
        return [
            "The provided schema is empty or undefined.",
            "Please provide a valid JSON schema.",
        ]

    ref_count = count_refs(schema)
    if ref_count:
        return [
            "This schema contains $ref references.",
            f"Found {ref_count} $ref reference(s) in the schema.",
            "Please dereference the schema before analyzing it.",
        ]

    return []
