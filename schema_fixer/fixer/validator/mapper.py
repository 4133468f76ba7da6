"""Produce analyzer input errors with the jsonschema validator."""

from __future__ import annotations

import logging
from typing import Any

from jsonschema import Draft7Validator
from jsonschema import ValidationError as JsonSchemaError

from fixer.analyzer.models import ValidationError

logger = logging.getLogger(__name__)


def _missing_property(error: JsonSchemaError) -> str | None:
    """Name the property a ``required`` error is about.

    jsonschema yields one error per missing property, each message starting
    with that property's repr.
    """
    if not isinstance(error.instance, dict):
        return None
    missing = [
        name for name in error.validator_value if name not in error.instance
    ]
    for name in missing:
        if error.message.startswith(repr(name)):
            return name
    return missing[0] if missing else None


def _parameters(error: JsonSchemaError) -> dict[str, Any]:
    """Translate validator keywords to the ajv-style ``params`` shape."""
    if error.validator == "enum":
        return {"allowedValues": list(error.validator_value)}
    if error.validator in ("minItems", "maxItems", "minLength", "maxLength",
                           "minimum", "maximum"):
        return {"limit": error.validator_value}
    if error.validator == "required":
        return {"missingProperty": _missing_property(error)}
    if error.validator == "type":
        return {"type": error.validator_value}
    return {}


def map_error(error: JsonSchemaError) -> ValidationError:
    """Map one jsonschema error onto a dot-path ``ValidationError``.

    A ``required`` error points at the missing property itself rather than
    at the object that lacks it.
    """
    segments = [str(p) for p in error.absolute_path]
    if error.validator == "required":
        missing = _missing_property(error)
        if missing is not None:
            segments.append(missing)
    field_path = ".".join(segments)
    locator = "#/" + "/".join(str(p) for p in error.absolute_schema_path)
    return ValidationError(
        field_path=field_path,
        message=error.message,
        constraint_locator=locator,
        parameters=_parameters(error),
    )


def _leaf_errors(error: JsonSchemaError) -> list[JsonSchemaError]:
    """Flatten ``oneOf``/``anyOf`` failures down to the branch errors."""
    if not error.context:
        return [error]
    leaves: list[JsonSchemaError] = []
    for sub in error.context:
        leaves.extend(_leaf_errors(sub))
    return leaves


def map_validation_errors(data: Any, schema: dict) -> list[ValidationError]:
    """Validate ``data`` and return every failure as a ``ValidationError``.

    Errors are ordered by data path; combinator failures are expanded so
    each branch's failing keyword carries its own ``dependencies`` locator.
    """
    validator = Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.path)))

    mapped: list[ValidationError] = []
    for error in errors:
        mapped.extend(map_error(leaf) for leaf in _leaf_errors(error))

    logger.debug("jsonschema produced %d mapped errors", len(mapped))
    return mapped
