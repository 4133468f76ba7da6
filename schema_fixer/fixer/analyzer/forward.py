"""Forward dependency resolution.

Given a parent schema node and its live data, work out every field the
currently selected ``dependencies``/``oneOf`` branch requires, following
cascading dependency chains.
"""

from __future__ import annotations

import copy
import json
from typing import Any

from fixer.analyzer.models import Suggestion
from fixer.schema.navigator import MISSING, NOT_SET, format_value, join_path


def enum_contains(enum: list[Any], value: Any) -> bool:
    """Membership test that does not treat ``True`` as ``1``."""
    for candidate in enum:
        if isinstance(candidate, bool) or isinstance(value, bool):
            if candidate is value:
                return True
        elif candidate == value:
            return True
    return False


def placeholder_for(field_schema: dict) -> list[Any]:
    """Describe the kind of value a field without an enum expects."""
    field_type = field_schema.get("type")
    if field_type in ("number", "integer"):
        return ["<a number>"]
    if field_type == "string":
        return ["<a string>"]
    if field_type == "boolean":
        return ["true or false"]
    if field_type == "array":
        min_items = field_schema.get("minItems")
        if min_items:
            return [f"at least {min_items} items"]
        return ["<an array>"]
    return ["<value required>"]


def dependencies_of(schema: Any) -> dict[str, Any]:
    if not isinstance(schema, dict):
        return {}
    dependencies = schema.get("dependencies")
    return dependencies if isinstance(dependencies, dict) else {}


def branches_of(rule: Any) -> list[dict]:
    if not isinstance(rule, dict):
        return []
    return [b for b in rule.get("oneOf") or [] if isinstance(b, dict)]


def trigger_enum(branch: dict, trigger: str) -> list[Any] | None:
    """Return the enum a branch places on its trigger field, if any."""
    trigger_schema = (branch.get("properties") or {}).get(trigger)
    if not isinstance(trigger_schema, dict):
        return None
    enum = trigger_schema.get("enum")
    return enum if isinstance(enum, list) and enum else None


def select_branch(rule: Any, trigger: str, trigger_value: Any) -> dict | None:
    """Pick the first branch whose trigger enum contains the value."""
    for branch in branches_of(rule):
        enum = trigger_enum(branch, trigger)
        if enum is not None and enum_contains(enum, trigger_value):
            return branch
    return None


def _visit_key(parent_path: str | None, trigger: str, value: Any) -> str:
    serialized = json.dumps(value, sort_keys=True, default=str)
    return f"{parent_path or 'root'}.{trigger}:{serialized}"


def current_value_of(value: Any) -> Any:
    """Report a data value as current; containers are copied out of the data."""
    if value is MISSING:
        return NOT_SET
    if isinstance(value, (list, dict)):
        return copy.deepcopy(value)
    return value


def _display(value: Any) -> Any:
    return NOT_SET if value is MISSING else format_value(value)


def find_all_required_fields(
    parent_schema: Any,
    parent_data: Any,
    parent_path: str | None,
    visited: set[str] | None = None,
) -> list[Suggestion]:
    """Collect suggestions for every active dependency branch of a node.

    ``visited`` guards against dependencies that trigger each other; it is
    created per call when omitted and never shared across calls.
    """
    if visited is None:
        visited = set()

    suggestions: list[Suggestion] = []
    dependencies = dependencies_of(parent_schema)
    if not dependencies:
        return suggestions

    data = parent_data if isinstance(parent_data, dict) else {}

    for trigger, rule in dependencies.items():
        if trigger not in data:
            continue
        trigger_value = data[trigger]

        key = _visit_key(parent_path, trigger, trigger_value)
        if key in visited:
            continue
        visited.add(key)

        branch = select_branch(rule, trigger, trigger_value)
        if branch is None:
            continue

        suggestions.extend(
            _check_branch(branch, trigger, data, parent_path, visited)
        )

        # Other set fields of this node may activate further rules.
        if any(name != trigger and name in dependencies for name in data):
            suggestions.extend(
                find_all_required_fields(parent_schema, data, parent_path, visited)
            )

    return suggestions


def _check_branch(
    branch: dict,
    trigger: str,
    data: dict,
    parent_path: str | None,
    visited: set[str],
) -> list[Suggestion]:
    suggestions: list[Suggestion] = []
    required = branch.get("required") or []

    for name, prop in (branch.get("properties") or {}).items():
        if name == trigger or not isinstance(prop, dict):
            continue

        path = join_path(parent_path, name)
        value = data.get(name, MISSING)
        enum = prop.get("enum")

        if isinstance(enum, list):
            if value is MISSING or not enum_contains(enum, value):
                suggestions.append(
                    Suggestion(
                        field=path,
                        current_value=current_value_of(value),
                        allowed_values=list(enum),
                        is_required=name in required,
                        title=prop.get("title") or name,
                    )
                )
        elif prop.get("type") == "object":
            child = None if value is MISSING else value
            suggestions.extend(check_nested_required_fields(prop, path, child))
            if dependencies_of(prop):
                suggestions.extend(
                    find_all_required_fields(prop, child, path, visited)
                )
        elif name in required and value is MISSING:
            suggestions.append(
                Suggestion(
                    field=path,
                    current_value=NOT_SET,
                    allowed_values=placeholder_for(prop),
                    is_required=True,
                    title=prop.get("title") or name,
                )
            )

    return suggestions


def check_nested_required_fields(
    prop_schema: dict,
    prop_path: str,
    prop_value: Any,
) -> list[Suggestion]:
    """Check one level of an object property's declared sub-fields.

    The authoritative schema decides what is required here, so these
    suggestions are flagged ``nested`` and survive UI-visibility pruning.
    """
    properties = prop_schema.get("properties")
    if prop_schema.get("type") != "object" or not isinstance(properties, dict):
        return []

    suggestions: list[Suggestion] = []
    required = prop_schema.get("required") or []
    data = prop_value if isinstance(prop_value, dict) else {}

    for name, field_schema in properties.items():
        if not isinstance(field_schema, dict):
            continue

        path = f"{prop_path}.{name}"
        value = data.get(name, MISSING)
        is_required = name in required
        enum = field_schema.get("enum")

        if isinstance(enum, list):
            invalid = value is not MISSING and not enum_contains(enum, value)
            if invalid or (value is MISSING and is_required):
                suggestions.append(
                    Suggestion(
                        field=path,
                        current_value=current_value_of(value),
                        allowed_values=list(enum),
                        is_required=is_required,
                        title=field_schema.get("title"),
                        nested=True,
                    )
                )
        elif is_required and value is MISSING:
            suggestions.append(
                Suggestion(
                    field=path,
                    current_value=NOT_SET,
                    allowed_values=placeholder_for(field_schema),
                    is_required=True,
                    title=field_schema.get("title"),
                    nested=True,
                )
            )

        if field_schema.get("type") == "array" and isinstance(value, list):
            suggestions.extend(_check_array(field_schema, path, value))

    return suggestions


def _check_array(array_schema: dict, path: str, items: list) -> list[Suggestion]:
    """Length limits plus required leaves of each object element."""
    suggestions: list[Suggestion] = []
    title = array_schema.get("title")
    current = f"array with {len(items)} items"

    min_items = array_schema.get("minItems")
    if min_items and len(items) < min_items:
        suggestions.append(
            Suggestion(
                field=path,
                current_value=current,
                allowed_values=[f"at least {min_items} items"],
                is_required=True,
                title=title,
                nested=True,
            )
        )

    max_items = array_schema.get("maxItems")
    if max_items and len(items) > max_items:
        suggestions.append(
            Suggestion(
                field=path,
                current_value=current,
                allowed_values=[f"at most {max_items} items"],
                is_required=True,
                title=title,
                nested=True,
            )
        )

    item_schema = array_schema.get("items")
    if not isinstance(item_schema, dict):
        return suggestions
    item_properties = item_schema.get("properties")
    if not isinstance(item_properties, dict):
        return suggestions
    item_required = item_schema.get("required") or []

    for index, item in enumerate(items):
        item_data = item if isinstance(item, dict) else {}
        for name, field_schema in item_properties.items():
            if name not in item_required or not isinstance(field_schema, dict):
                continue
            value = item_data.get(name, MISSING)
            if value is MISSING or value is None or value == "":
                suggestions.append(
                    Suggestion(
                        field=f"{path}.{index}.{name}",
                        current_value=_display(value),
                        allowed_values=placeholder_for(field_schema),
                        is_required=True,
                        title=field_schema.get("title"),
                        nested=True,
                    )
                )

    return suggestions
