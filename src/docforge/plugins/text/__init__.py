"""
Module: plugins.text

Purpose:
    Text and multi-variable text field types.

Key Objects:
    - text: Plain wrapped text; optional autoHeight dynamic height
    - multi_variable_text: ``{var}`` template filled from a JSON object

Used By:
    - plugins.builtins
"""

from __future__ import annotations

import re
from typing import Any, List, Mapping

from docforge.core.models import Primitive, Schema
from docforge.plugins.registry import Plugin, RenderContext
from docforge.plugins.utils import as_text, parse_json_value

from .measure import split_text_to_lines, line_height_mm, fit_font_size
from .render import (
    DEFAULT_FONT_SIZE,
    draw_text,
    text_content_height,
    text_style,
)

VARIABLE_PATTERN = re.compile(r"\{([^{}]+)\}")

TEXT_DEFAULT_SCHEMA = {
    "type": "text",
    "content": "Type Something...",
    "position": {"x": 0, "y": 0},
    "width": 45,
    "height": 10,
    "rotation": 0,
    "alignment": "left",
    "verticalAlignment": "top",
    "fontSize": DEFAULT_FONT_SIZE,
    "lineHeight": 1,
    "characterSpacing": 0,
    "fontColor": "#000000",
    "backgroundColor": "",
    "opacity": 1,
}


def _text_pdf(ctx: RenderContext) -> List[Primitive]:
    return draw_text(ctx, as_text(ctx.value))


def text_dynamic_heights(value: Any, schema: Schema, *, page, fonts, cache) -> List[float]:
    """
    Height of a text box.

    Boxes marked ``autoHeight`` grow to fit their wrapped content (never
    shrinking below the template height); others keep their height.
    """
    if not schema.get("autoHeight"):
        return [schema.height]
    return [max(schema.height, text_content_height(as_text(value), schema, fonts))]


text = Plugin(
    pdf=_text_pdf,
    default_schema=TEXT_DEFAULT_SCHEMA,
    get_dynamic_heights=text_dynamic_heights,
)


def substitute_variables(template: str, variables: Mapping[str, Any]) -> str:
    """
    Fill ``{name}`` slots; slots with no variable are removed.

    Example:
        >>> substitute_variables("Hi {name}{x}!", {"name": "Ada"})
        'Hi Ada!'
    """
    return VARIABLE_PATTERN.sub(lambda m: as_text(variables.get(m.group(1).strip(), "")), template)


def _multi_variable_text_pdf(ctx: RenderContext) -> List[Primitive]:
    variables = parse_json_value(ctx.value, ctx.schema, dict)
    return draw_text(ctx, substitute_variables(ctx.schema.get("text", ""), variables))


def _check_multi_variable_value(value: Any, schema: Schema):
    try:
        parse_json_value(value, schema, dict)
    except ValueError as exc:
        return str(exc)
    return None


multi_variable_text = Plugin(
    pdf=_multi_variable_text_pdf,
    default_schema={
        **TEXT_DEFAULT_SCHEMA,
        "type": "multiVariableText",
        "content": "{}",
        "text": "Add text here using {} for variables ",
        "variables": [],
    },
    check_value=_check_multi_variable_value,
)

__all__ = [
    "text",
    "multi_variable_text",
    "substitute_variables",
    "text_dynamic_heights",
    "draw_text",
    "text_style",
    "split_text_to_lines",
    "line_height_mm",
    "fit_font_size",
]
