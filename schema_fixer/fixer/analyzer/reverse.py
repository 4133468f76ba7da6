"""Reverse dependency resolution.

Given an error field whose current value is invalid under the active
branch, find the trigger values whose branch would accept that value.
"""

from __future__ import annotations

from typing import Any

from fixer.analyzer.extractor import get_field_name
from fixer.analyzer.forward import (
    branches_of,
    dependencies_of,
    enum_contains,
    trigger_enum,
)
from fixer.analyzer.models import Suggestion
from fixer.schema.navigator import (
    MISSING,
    NOT_SET,
    field_exists_in_schema,
    format_value,
    get_field_label,
    get_schema_for_path,
    is_index,
    join_path,
    split_path,
)


def _add_unique(candidates: list[Any], values: list[Any]) -> None:
    for value in values:
        if not enum_contains(candidates, value):
            candidates.append(value)


def _visible_candidates(
    ui_schema: dict | None,
    trigger_path: str,
    candidates: list[Any],
    current_trigger: Any,
) -> list[Any]:
    """Drop the current trigger value and values the UI cannot select."""
    if not field_exists_in_schema(trigger_path, ui_schema):
        return []

    if current_trigger is not MISSING:
        candidates = [c for c in candidates if not enum_contains([current_trigger], c)]

    ui_node = get_schema_for_path(ui_schema, trigger_path) or {}
    ui_enum = ui_node.get("enum")
    if isinstance(ui_enum, list):
        candidates = [c for c in candidates if enum_contains(ui_enum, c)]

    return candidates


def _trigger_suggestion(
    ui_schema: dict | None,
    trigger_path: str,
    current_trigger: Any,
    candidates: list[Any],
) -> Suggestion:
    return Suggestion(
        field=trigger_path,
        current_value=NOT_SET if current_trigger is MISSING else format_value(current_trigger),
        allowed_values=candidates,
        is_required=True,
        title=get_field_label(trigger_path, ui_schema),
    )


def find_reverse_dependencies(
    ui_schema: dict | None,
    error_field: str,
    error_value: Any,
    parent_schema: Any,
    parent_path: str | None,
    parent_data: Any,
) -> list[Suggestion]:
    """Suggest trigger values under which ``error_value`` would be valid.

    One suggestion per dependency rule of ``parent_schema`` that has
    candidates left after filtering.
    """
    alternatives: list[Suggestion] = []

    error_name = get_field_name(error_field)
    if not error_name or error_value is MISSING:
        return alternatives

    data = parent_data if isinstance(parent_data, dict) else {}

    for trigger, rule in dependencies_of(parent_schema).items():
        if trigger == error_name:
            continue

        candidates: list[Any] = []
        for branch in branches_of(rule):
            field_schema = (branch.get("properties") or {}).get(error_name)
            if not isinstance(field_schema, dict):
                continue
            enum = field_schema.get("enum")
            if isinstance(enum, list) and enum_contains(enum, error_value):
                _add_unique(candidates, trigger_enum(branch, trigger) or [])

        if not candidates:
            continue

        trigger_path = join_path(parent_path, trigger)
        current_trigger = data.get(trigger, MISSING)
        candidates = _visible_candidates(
            ui_schema, trigger_path, candidates, current_trigger
        )
        if candidates:
            alternatives.append(
                _trigger_suggestion(ui_schema, trigger_path, current_trigger, candidates)
            )

    return alternatives


def _branch_node(branch: dict, relative_path: str) -> dict | None:
    """Locate a field inside a branch's properties, or None."""
    node: Any = branch.get("properties") or {}
    for part in split_path(relative_path):
        if not isinstance(node, dict):
            return None
        if is_index(part):
            node = node.get("items")
        elif isinstance(node.get(part), dict):
            node = node[part]
        elif isinstance(node.get("properties"), dict) and part in node["properties"]:
            node = node["properties"][part]
        else:
            return None
    return node if isinstance(node, dict) else None


def _allows_length(node: dict | None, length: int) -> bool:
    if node is None:
        return True
    min_items = node.get("minItems")
    max_items = node.get("maxItems")
    if min_items and length < min_items:
        return False
    if max_items and length > max_items:
        return False
    return True


def find_array_constraint_alternatives(
    ui_schema: dict | None,
    rule: Any,
    trigger: str,
    trigger_path: str,
    trigger_value: Any,
    relative_path: str,
    current_length: int,
) -> list[Suggestion]:
    """Suggest trigger values whose branch accepts the array's current length."""
    candidates: list[Any] = []
    for branch in branches_of(rule):
        enum = trigger_enum(branch, trigger)
        if enum is None:
            continue
        if _allows_length(_branch_node(branch, relative_path), current_length):
            _add_unique(candidates, enum)

    candidates = _visible_candidates(ui_schema, trigger_path, candidates, trigger_value)
    if not candidates:
        return []
    return [_trigger_suggestion(ui_schema, trigger_path, trigger_value, candidates)]
