"""
Module: plugins.fields

Purpose:
    Form-style field types built on the text renderer or simple shapes.

Key Objects:
    - date, time, date_time: ISO values reformatted with a token format
    - select: One of a fixed list of options, drawn as text
    - checkbox: Square with a tick when the value is "true"
    - radio_group: Circle with a filled dot when the value is "true"

Key Functions:
    - format_datetime_value(): Apply a ``YYYY MM DD HH mm ss`` format
"""

from __future__ import annotations

import re
from datetime import date as _date, datetime, time as _time
from typing import Any, Callable, List, Optional

from docforge.common.colors import optional_color
from docforge.core.models import Ellipse, Line, Primitive, Rectangle, Schema
from docforge.plugins.registry import Plugin, RenderContext
from docforge.plugins.text import TEXT_DEFAULT_SCHEMA, draw_text
from docforge.plugins.utils import as_text, is_checked, primitive_common

DATE_FORMAT = "YYYY/MM/DD"
TIME_FORMAT = "HH:mm"
DATETIME_FORMAT = "YYYY/MM/DD HH:mm"

_TOKEN_PATTERN = re.compile(r"YYYY|MM|DD|HH|mm|ss")


def format_datetime_value(value: datetime, fmt: str) -> str:
    """
    Format with ``YYYY MM DD HH mm ss`` tokens; other characters are literal.

    Example:
        >>> format_datetime_value(datetime(2024, 3, 9, 7, 5), "DD.MM.YYYY HH:mm")
        '09.03.2024 07:05'
    """
    tokens = {
        "YYYY": f"{value.year:04d}",
        "MM": f"{value.month:02d}",
        "DD": f"{value.day:02d}",
        "HH": f"{value.hour:02d}",
        "mm": f"{value.minute:02d}",
        "ss": f"{value.second:02d}",
    }
    return _TOKEN_PATTERN.sub(lambda m: tokens[m.group(0)], fmt)


def _parse_date(text: str) -> datetime:
    return datetime.combine(_date.fromisoformat(text), _time())


def _parse_time(text: str) -> datetime:
    return datetime.combine(_date(1970, 1, 1), _time.fromisoformat(text))


def _date_plugin(type_name: str, default_format: str, parse: Callable[[str], datetime], width: float) -> Plugin:
    def _pdf(ctx: RenderContext) -> List[Primitive]:
        text = as_text(ctx.value).strip()
        if text:
            try:
                text = format_datetime_value(parse(text), ctx.schema.get("format") or default_format)
            except ValueError:
                # Non-ISO values are drawn as given.
                pass
        return draw_text(ctx, text)

    def _check(value: Any, schema: Schema) -> Optional[str]:
        text = as_text(value).strip()
        if not text:
            return None
        try:
            parse(text)
        except ValueError:
            return f"{text!r} is not an ISO {type_name} value; it will be drawn as given"
        return None

    return Plugin(
        pdf=_pdf,
        default_schema={
            **TEXT_DEFAULT_SCHEMA,
            "type": type_name,
            "content": "",
            "width": width,
            "format": default_format,
        },
        check_value=_check,
    )


date = _date_plugin("date", DATE_FORMAT, _parse_date, 35)
time = _date_plugin("time", TIME_FORMAT, _parse_time, 25)
date_time = _date_plugin("dateTime", DATETIME_FORMAT, datetime.fromisoformat, 50)


def _select_pdf(ctx: RenderContext) -> List[Primitive]:
    return draw_text(ctx, as_text(ctx.value))


def _check_select_value(value: Any, schema: Schema) -> Optional[str]:
    options = schema.get("options") or []
    text = as_text(value)
    if text and options and text not in options:
        return f"{text!r} is not one of the options {options!r}"
    return None


select = Plugin(
    pdf=_select_pdf,
    default_schema={
        **TEXT_DEFAULT_SCHEMA,
        "type": "select",
        "content": "option1",
        "options": ["option1", "option2"],
    },
    check_value=_check_select_value,
)


def _check_boolean_value(value: Any, schema: Schema) -> Optional[str]:
    text = as_text(value).strip().lower()
    if text not in ("", "true", "false"):
        return f"{as_text(value)!r} is not 'true' or 'false'"
    return None


def _checkbox_pdf(ctx: RenderContext) -> List[Primitive]:
    schema = ctx.schema
    common = primitive_common(schema)
    color = optional_color(schema.get("color")) or "#000000"
    x, y, w, h = schema.position.x, schema.position.y, schema.width, schema.height
    stroke = min(w, h) / 10

    primitives: List[Primitive] = [Rectangle(
        x=x, y=y, width=w, height=h, stroke_color=color, stroke_width=stroke, **common
    )]
    if is_checked(ctx.value):
        primitives.append(Line(
            x1=x + w * 0.2, y1=y + h * 0.55, x2=x + w * 0.42, y2=y + h * 0.78,
            color=color, stroke_width=stroke * 1.5, **common,
        ))
        primitives.append(Line(
            x1=x + w * 0.42, y1=y + h * 0.78, x2=x + w * 0.8, y2=y + h * 0.22,
            color=color, stroke_width=stroke * 1.5, **common,
        ))
    return primitives


def _radio_group_pdf(ctx: RenderContext) -> List[Primitive]:
    schema = ctx.schema
    common = primitive_common(schema)
    color = optional_color(schema.get("color")) or "#000000"
    x, y, w, h = schema.position.x, schema.position.y, schema.width, schema.height
    stroke = min(w, h) / 10

    primitives: List[Primitive] = [Ellipse(
        x=x, y=y, width=w, height=h, stroke_color=color, stroke_width=stroke, **common
    )]
    if is_checked(ctx.value):
        primitives.append(Ellipse(
            x=x + w * 0.25, y=y + h * 0.25, width=w / 2, height=h / 2, fill_color=color, **common
        ))
    return primitives


_TOGGLE_DEFAULTS = {
    "content": "false",
    "position": {"x": 0, "y": 0},
    "width": 8,
    "height": 8,
    "rotation": 0,
    "opacity": 1,
    "color": "#000000",
}

checkbox = Plugin(
    pdf=_checkbox_pdf,
    default_schema={**_TOGGLE_DEFAULTS, "type": "checkbox"},
    check_value=_check_boolean_value,
)

radio_group = Plugin(
    pdf=_radio_group_pdf,
    default_schema={**_TOGGLE_DEFAULTS, "type": "radioGroup", "group": ""},
    check_value=_check_boolean_value,
)
