"""Helpers shared by the built-in renderers."""

from __future__ import annotations

import json
from typing import Any, Dict

from docforge.core.errors import InvalidFieldValue
from docforge.core.models import Schema


def primitive_common(schema: Schema) -> Dict[str, Any]:
    """Fields every primitive of a schema shares: origin, opacity, rotation."""
    common: Dict[str, Any] = {"schema_name": schema.name, "opacity": schema.opacity}
    if schema.rotation:
        common["rotation"] = schema.rotation
        common["pivot"] = schema.center
    return common


def as_text(value: Any) -> str:
    """Render-ready string for a raw input value (None -> '')."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def is_checked(value: Any) -> bool:
    """Stringified boolean input ('true'/'false') as a bool."""
    return as_text(value).strip().lower() == "true"


def parse_json_value(value: Any, schema: Schema, expected: type) -> Any:
    """
    Decode a JSON-encoded input value of the expected type.

    Already-decoded values of the right type pass through; '' decodes to
    an empty instance.

    Raises:
        InvalidFieldValue: If the value is malformed JSON or the wrong type
    """
    if isinstance(value, expected):
        return value
    if value is None or value == "":
        return expected()
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError) as exc:
        raise InvalidFieldValue(
            f"Value of {schema.name!r} is not valid JSON: {exc}", schema.name
        ) from exc
    if not isinstance(decoded, expected):
        raise InvalidFieldValue(
            f"Value of {schema.name!r} must be a JSON {expected.__name__}, got {type(decoded).__name__}",
            schema.name,
        )
    return decoded
