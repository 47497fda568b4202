"""
Template and Input Validation

Checks a template and the input records meant to fill it, collecting
every violation instead of stopping at the first.

Two independent checks:
- check_template(): known types, finite non-negative geometry, hex
  colours, table body ranges, unique names per page, base document
  page count, known fonts
- check_inputs(): required fields present in every record (read-only
  fields excepted), values each plugin can interpret

Violations carry a ``fatal`` flag. Required-field gaps, duplicate names
and an over-long template are fatal; format problems are reported as
warnings and only abort generation in strict mode (see raise_for_violations).

validate_template_data() checks raw template JSON before it is parsed;
with strict=True the bundled template.schema.json is applied with
jsonschema.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import jsonschema

from docforge.common.colors import is_hex_valid
from docforge.common.fonts import FontSet
from docforge.core.errors import DocforgeError
from docforge.core.models import Schema, Template
from docforge.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)

# Violation kinds
UNKNOWN_TYPE = "unknown_type"
INVALID_GEOMETRY = "invalid_geometry"
INVALID_COLOR = "invalid_color"
INVALID_BODY_RANGE = "invalid_body_range"
DUPLICATE_NAME = "duplicate_name"
PAGE_COUNT = "page_count"
UNKNOWN_FONT = "unknown_font"
MISSING_REQUIRED = "missing_required"
NO_INPUTS = "no_inputs"
INVALID_VALUE = "invalid_value"
STRUCTURE = "structure"

GEOMETRY_FIELDS = ("width", "height")

# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


@dataclass(frozen=True)
class Violation:
    """
    One problem found in a template or input records.

    Attributes:
        path: Location, e.g. "schemas[0][2].width" or "inputs[1].name"
        message: Human-readable description
        schema_name: Name of the schema concerned ("" if none)
        kind: Machine-readable category
        fatal: Whether generation must abort
    """

    path: str
    message: str
    schema_name: str = ""
    kind: str = INVALID_VALUE
    fatal: bool = False

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


class ValidationError(DocforgeError):
    """Raised when a template or its inputs fail validation."""

    def __init__(
        self,
        message: str,
        path: str = "",
        errors: list[str] | None = None,
        violations: Sequence[Violation] = (),
    ):
        super().__init__(message)
        self.path = path
        self.violations = list(violations)
        self.errors = errors if errors is not None else [str(v) for v in self.violations]

    @property
    def schema_names(self) -> List[str]:
        return [v.schema_name for v in self.violations if v.schema_name]


def _schema_path(page_index: int, schema_index: int) -> str:
    return f"schemas[{page_index}][{schema_index}]"


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _iter_color_fields(data: Mapping[str, Any], prefix: str) -> Iterable[tuple[str, Any]]:
    """Yield (dotted path, value) for every key ending in 'color' (nested styles included)."""
    for key, value in data.items():
        if isinstance(value, Mapping):
            yield from _iter_color_fields(value, f"{prefix}.{key}")
        elif key.lower().endswith("color"):
            yield f"{prefix}.{key}", value


def _check_geometry(schema: Schema, path: str) -> List[Violation]:
    violations = []
    values = {
        "width": schema.width,
        "height": schema.height,
        "position.x": schema.position.x,
        "position.y": schema.position.y,
    }
    for name, value in values.items():
        if not _is_finite_number(value):
            message = f"{name} must be a finite number, got {value!r}"
        elif value < 0:
            message = f"{name} must not be negative, got {value!r}"
        else:
            continue
        violations.append(Violation(f"{path}.{name}", message, schema.name, INVALID_GEOMETRY))

    if not _is_finite_number(schema.opacity) or not 0 <= schema.opacity <= 1:
        violations.append(Violation(
            f"{path}.opacity", f"opacity must be between 0 and 1, got {schema.opacity!r}",
            schema.name, INVALID_GEOMETRY,
        ))
    if not _is_finite_number(schema.rotation):
        violations.append(Violation(
            f"{path}.rotation", f"rotation must be a finite number, got {schema.rotation!r}",
            schema.name, INVALID_GEOMETRY,
        ))
    return violations


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _check_body_range(schema: Schema, path: str) -> List[Violation]:
    body_range = schema.body_range
    if body_range is None:
        return []
    start, end = body_range.start, body_range.end
    if not _is_index(start) or (end is not None and not _is_index(end)):
        return [Violation(
            f"{path}.bodyRange", f"bodyRange bounds must be non-negative integers, got {body_range.to_dict()}",
            schema.name, INVALID_BODY_RANGE, fatal=True,
        )]
    if end is not None and start > end:
        return [Violation(
            f"{path}.bodyRange", f"bodyRange start ({start}) is after end ({end})",
            schema.name, INVALID_BODY_RANGE, fatal=True,
        )]
    return []


def _font_names(schema: Schema) -> Iterable[tuple[str, str]]:
    if schema.get("fontName"):
        yield "fontName", schema.get("fontName")
    for style_key in ("headStyles", "bodyStyles"):
        style = schema.get(style_key) or {}
        if isinstance(style, Mapping) and style.get("fontName"):
            yield f"{style_key}.fontName", style["fontName"]


def check_template(
    template: Template,
    registry: PluginRegistry,
    *,
    fonts: Optional[FontSet] = None,
    base_page_count: Optional[int] = None,
) -> List[Violation]:
    """
    Check a template for structural problems.

    Args:
        template: Parsed template
        registry: Plugins available for this call
        fonts: Font set; when given, unknown font names are reported
        base_page_count: Pages in the custom base document, if any

    Returns:
        Every violation found, in page then declaration order
    """
    violations: List[Violation] = []

    if base_page_count is not None and template.page_count > base_page_count:
        violations.append(Violation(
            "basePdf",
            f"Template has {template.page_count} pages but the base document has {base_page_count}",
            kind=PAGE_COUNT,
            fatal=True,
        ))

    for page_index, page in enumerate(template.schemas):
        seen: set[str] = set()
        for schema_index, schema in enumerate(page):
            path = _schema_path(page_index, schema_index)

            if schema.type not in registry:
                violations.append(Violation(
                    f"{path}.type", f"Unknown schema type {schema.type!r}", schema.name, UNKNOWN_TYPE, fatal=True,
                ))

            if schema.name in seen:
                violations.append(Violation(
                    f"{path}.name", f"Duplicate schema name {schema.name!r} on page {page_index + 1}",
                    schema.name, DUPLICATE_NAME, fatal=True,
                ))
            seen.add(schema.name)

            violations.extend(_check_geometry(schema, path))
            violations.extend(_check_body_range(schema, path))

            for color_path, value in _iter_color_fields(schema.props, path):
                if value in (None, "") or (isinstance(value, str) and value.lower() == "transparent"):
                    continue
                if not isinstance(value, str) or not is_hex_valid(value):
                    violations.append(Violation(
                        color_path, f"Invalid hex color {value!r}", schema.name, INVALID_COLOR,
                    ))

            if fonts is not None:
                for font_path, font_name in _font_names(schema):
                    if font_name not in fonts:
                        violations.append(Violation(
                            f"{path}.{font_path}",
                            f"Font {font_name!r} is not in the font set; {fonts.fallback!r} will be used",
                            schema.name, UNKNOWN_FONT,
                        ))

    return violations


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def check_inputs(
    template: Template,
    inputs: Sequence[Mapping[str, Any]],
    registry: PluginRegistry,
) -> List[Violation]:
    """
    Check input records against the template's fields.

    A field is required when its schema (or, failing that, its plugin's
    default schema) says so. Read-only fields are never required since
    their value comes from the template.

    Returns:
        Every violation found, in record then page then declaration order
    """
    if not inputs:
        return [Violation("inputs", "At least one input record is required", kind=NO_INPUTS, fatal=True)]

    violations: List[Violation] = []
    for record_index, record in enumerate(inputs):
        record_violations: List[Violation] = []
        for _, schema in template.iter_schemas():
            if schema.read_only or schema.type not in registry:
                continue
            plugin = registry.find(schema.type)
            value = record.get(schema.name)
            path = f"inputs[{record_index}].{schema.name}"

            found: Optional[Violation] = None
            if _is_empty(value):
                if plugin.is_required(schema):
                    found = Violation(
                        path, f"Required field {schema.name!r} has no value",
                        schema.name, MISSING_REQUIRED, fatal=True,
                    )
            elif plugin.check_value is not None:
                problem = plugin.check_value(value, schema)
                if problem:
                    found = Violation(path, problem, schema.name, INVALID_VALUE)

            # A field repeated on several pages is reported once per record
            if found is not None and found not in record_violations:
                record_violations.append(found)
        violations.extend(record_violations)
    return violations


def raise_for_violations(violations: Sequence[Violation], *, strict: bool = False) -> List[Violation]:
    """
    Abort on fatal violations (every violation in strict mode).

    Non-fatal violations are logged and returned as warnings.

    Raises:
        ValidationError: Enumerating every violation found
    """
    blocking = [v for v in violations if v.fatal or strict]
    if blocking:
        raise ValidationError(
            f"Validation failed with {len(blocking)} violation(s): "
            + "; ".join(str(v) for v in blocking),
            path=blocking[0].path,
            violations=violations,
        )
    for violation in violations:
        logger.warning(f"Validation warning: {violation}")
    return list(violations)


def validate_template_data(data: Any, *, strict: bool = False) -> None:
    """
    Validate raw template JSON before parsing.

    Args:
        data: Decoded template JSON
        strict: If True, use jsonschema; if False, do basic checks only

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, Mapping):
        raise ValidationError(f"Template must be a JSON object, got {type(data).__name__}")

    missing = [f for f in ("basePdf", "schemas") if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path="",
            errors=[f"Missing field: {f}" for f in missing],
        )
    if not isinstance(data["schemas"], list):
        raise ValidationError("schemas must be a list of pages", path="schemas")

    if strict:
        validator = jsonschema.Draft7Validator(_load_schema("template"))
        violations = [
            Violation(
                ".".join(str(p) for p in error.absolute_path),
                error.message,
                kind=STRUCTURE,
                fatal=True,
            )
            for error in sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.absolute_path)))
        ]
        if violations:
            raise ValidationError(
                f"Schema validation failed: {violations[0].message}",
                path=violations[0].path,
                violations=violations,
            )
