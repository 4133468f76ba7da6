"""Read dependency context out of error locators and field paths."""

from __future__ import annotations

import re

from fixer.schema.navigator import split_path

# e.g. "#/properties/customer/dependencies/lro/oneOf/1/properties/lro/enum"
_DEPENDENCY_SEGMENT = re.compile(r"/dependencies/([^/]+)/")
_ARRAY_LIMIT_KEYWORDS = ("minItems", "maxItems")


def find_dependency_field(locator: str | None) -> str | None:
    """Return the trigger field named in a ``/dependencies/<name>/`` segment."""
    if not locator:
        return None
    match = _DEPENDENCY_SEGMENT.search(locator)
    return match.group(1) if match else None


def get_parent_path(field_path: str) -> str | None:
    """Return all but the last segment, or None for a top-level field."""
    parts = split_path(field_path)
    if len(parts) <= 1:
        return None
    return ".".join(parts[:-1])


def get_field_name(field_path: str) -> str | None:
    parts = split_path(field_path)
    return parts[-1] if parts else None


def is_array_constraint(locator: str | None) -> bool:
    """True when the failing rule is an array length limit."""
    if not locator:
        return False
    return any(f"/{keyword}" in locator for keyword in _ARRAY_LIMIT_KEYWORDS)
