"""Path navigation over JSON-Schema trees and data trees.

Paths are dot-separated; numeric segments denote array indices. Every
helper here is total: malformed paths, missing properties and out-of-range
indices resolve to a "not found" value instead of raising.
"""

from __future__ import annotations

import json
import re
from typing import Any

NOT_SET = "<not set>"

# Distinguishes an absent key from an explicit JSON null.
MISSING = object()

_BRACKET_INDEX = re.compile(r"\[([0-9]+)\]")


def normalize_path(path: str) -> str:
    """Normalize ``.a.b[0].c`` style paths to ``a.b.0.c``."""
    if not path:
        return ""
    path = _BRACKET_INDEX.sub(r".\1", path)
    return ".".join(part for part in path.split(".") if part)


def split_path(path: str | None) -> list[str]:
    """Split a path into segments after normalization."""
    normalized = normalize_path(path or "")
    return normalized.split(".") if normalized else []


def join_path(parent: str | None, name: str) -> str:
    """Append a segment to an optional parent path."""
    return f"{parent}.{name}" if parent else name


def is_index(segment: str) -> bool:
    return segment.isascii() and segment.isdigit()


def _resolve(schema: Any, segments: list[str]) -> dict | None:
    """Walk schema nodes by segment, or return None on any failure."""
    current = schema
    for part in segments:
        if not isinstance(current, dict):
            return None

        if is_index(part):
            items = current.get("items")
            if current.get("type") == "array" and isinstance(items, dict):
                current = items
                continue
            return None

        properties = current.get("properties")
        container = properties if isinstance(properties, dict) else current
        child = container.get(part)
        if not isinstance(child, dict):
            return None
        current = child

    return current if isinstance(current, dict) else None


def field_exists_in_schema(path: str, schema: dict | None) -> bool:
    """Check whether a field path resolves to a node of the schema."""
    segments = split_path(path)
    if not segments or not schema:
        return False
    return _resolve(schema, segments) is not None


def get_schema_for_path(schema: dict | None, path: str | None) -> dict | None:
    """Return the schema node for a path; the root node for an empty path."""
    if not schema:
        return None
    return _resolve(schema, split_path(path))


def get_field_label(path: str, schema: dict | None) -> str:
    """Return the node's title, falling back to the path itself."""
    segments = split_path(path)
    if not segments or not schema:
        return path
    node = _resolve(schema, segments)
    if node is None:
        return path
    title = node.get("title")
    return title if isinstance(title, str) and title else path


def get_nested_value(data: Any, path: str | None, default: Any = None) -> Any:
    """Read a value from a data tree by path.

    A numeric segment indexes a list. A missing key, a non-list indexed
    by number, an out-of-range index, or a None link all yield ``default``.
    """
    current = data
    for part in split_path(path):
        if current is None:
            return default
        if is_index(part):
            index = int(part)
            if not isinstance(current, list) or index >= len(current):
                return default
            current = current[index]
        elif isinstance(current, dict):
            if part not in current:
                return default
            current = current[part]
        else:
            return default
    return current


def format_value(value: Any) -> str:
    """Render a data value for display in a suggestion."""
    if value is None:
        return "null"
    if value == "":
        return "<empty string>"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)
