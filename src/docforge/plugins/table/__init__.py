"""
Table field type.

The value is a JSON list of rows; the header comes from the schema's
``head``. Tables are the only built-in type whose height depends on
content and that can be split across pages (see generator.layout).
"""

from __future__ import annotations

import json
from typing import Any

from docforge.core.models import Schema
from docforge.plugins.registry import Plugin

from .layout import (
    CellLayout,
    RowLayout,
    TableLayout,
    create_single_table,
    get_dynamic_heights_for_table,
    parse_table_value,
)
from .render import draw_table
from .styles import BODY_STYLE_DEFAULTS, HEAD_STYLE_DEFAULTS, TABLE_STYLE_DEFAULTS

TABLE_DEFAULT_SCHEMA = {
    "type": "table",
    "position": {"x": 0, "y": 0},
    "width": 150,
    "height": 20,
    "content": json.dumps([
        ["Alice", "New York", "Alice is a freelance web designer and developer"],
        ["Bob", "Paris", "Bob is a freelance illustrator and graphic designer"],
    ]),
    "showHead": True,
    "head": ["Name", "City", "Description"],
    "headWidthPercentages": [30, 30, 40],
    "tableStyles": dict(TABLE_STYLE_DEFAULTS),
    "headStyles": dict(HEAD_STYLE_DEFAULTS),
    "bodyStyles": dict(BODY_STYLE_DEFAULTS),
    "columnStyles": {},
}


def _check_table_value(value: Any, schema: Schema):
    try:
        parse_table_value(value, schema)
    except ValueError as exc:
        return str(exc)
    return None


table = Plugin(
    pdf=draw_table,
    default_schema=TABLE_DEFAULT_SCHEMA,
    get_dynamic_heights=get_dynamic_heights_for_table,
    check_value=_check_table_value,
)

__all__ = [
    "table",
    "TableLayout",
    "RowLayout",
    "CellLayout",
    "create_single_table",
    "get_dynamic_heights_for_table",
    "parse_table_value",
    "draw_table",
]
