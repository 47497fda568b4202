"""
Serialization Utilities

To/from JSON helpers for templates and input records.

- Templates: ``serialize_template`` / ``deserialize_template`` and the
  file wrappers ``load_template`` / ``save_template``
- Inputs: ``load_inputs`` reads a JSON array of records or JSONL
- ``get_input_from_template`` builds a sample record from a template's
  default content
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from ..models.template import Template
from ..schemas.validator import ValidationError, validate_template_data


# ─────────────────────────────────────────────────────────────────────────────
# Template Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_template(template: Template) -> dict[str, Any]:
    """
    Serialize a Template to a dictionary.

    Custom base documents are written as base64 data URIs.
    """
    return template.to_dict()


def deserialize_template(
    data: Any,
    *,
    validate: bool = True,
    strict: bool = False,
) -> Template:
    """
    Deserialize a Template from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate the raw structure first
        strict: Apply the bundled JSON schema (implies validate)

    Returns:
        Template instance

    Raises:
        ValidationError: If the data is invalid
    """
    if validate or strict:
        validate_template_data(data, strict=strict)
    try:
        return Template.from_dict(data)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid template: {exc}") from exc


def load_template(path: Path, *, strict: bool = False) -> Template:
    """
    Load a template from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If the file is not a valid template
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Template file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path}: {e}", path=str(path)) from e
    return deserialize_template(data, strict=strict)


def save_template(template: Template, path: Path) -> None:
    """Save a template as pretty-printed JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(serialize_template(template), f, indent=2)


# ─────────────────────────────────────────────────────────────────────────────
# Input Records
# ─────────────────────────────────────────────────────────────────────────────

def load_inputs(path: Path) -> List[Dict[str, Any]]:
    """
    Load input records from a JSON array or a JSONL file (one record per line).

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If the file holds anything but records
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Inputs file not found: {path}")

    text = path.read_text(encoding="utf-8")
    if path.suffix == ".jsonl":
        records = []
        for line_no, line in enumerate(text.splitlines(), 1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise ValidationError(f"Invalid JSON on line {line_no}: {e}", path=f"{path}:{line_no}") from e
    else:
        try:
            records = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path}: {e}", path=str(path)) from e
        if isinstance(records, dict):
            records = [records]

    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ValidationError(f"Inputs must be a list of objects: {path}", path=str(path))
    return records


def get_input_from_template(template: Template) -> Dict[str, Any]:
    """
    Sample input record from the ``content`` of every non-read-only schema.

    Example:
        >>> t = Template.from_dict({"basePdf": {"width": 10, "height": 10},
        ...     "schemas": [[{"name": "a", "type": "text", "content": "hi",
        ...                   "position": {"x": 0, "y": 0}, "width": 5, "height": 5}]]})
        >>> get_input_from_template(t)
        {'a': 'hi'}
    """
    record: Dict[str, Any] = {}
    for _, schema in template.iter_schemas():
        if schema.read_only or schema.name in record:
            continue
        record[schema.name] = schema.content if schema.content is not None else ""
    return record
