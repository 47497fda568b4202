"""
Module: plugins.text.render

Purpose:
    Draw wrapped text inside a schema box. Shared by the text,
    multiVariableText, date/time and select plugins.

Key Functions:
    - text_style(): Resolve text styling from a schema
    - resolve_font_size(): Static size or fitted dynamic size
    - draw_text(): Text -> background + TextRun primitives
    - text_content_height(): Wrapped height for the autoHeight hook

Dependencies:
    - plugins.text.measure: Wrapping and metrics
    - core.models.primitives: TextRun, Rectangle
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from docforge.common.colors import optional_color
from docforge.common.units import pt2mm
from docforge.core.cache import make_cache_key
from docforge.core.models import Primitive, Rectangle, Schema, TextRun
from docforge.plugins.registry import RenderContext
from docforge.plugins.utils import primitive_common

from .measure import (
    fit_font_size,
    line_height_mm,
    split_text_to_lines,
    text_block_height,
    text_width_pt,
)

DEFAULT_FONT_SIZE = 13
DEFAULT_FONT_COLOR = "#000000"
DEFAULT_ALIGNMENT = "left"
DEFAULT_VERTICAL_ALIGNMENT = "top"
DEFAULT_LINE_HEIGHT = 1.0
DEFAULT_CHARACTER_SPACING = 0.0

ALIGNMENTS = ("left", "center", "right")
VERTICAL_ALIGNMENTS = ("top", "middle", "bottom")


@dataclass(frozen=True)
class TextStyle:
    font_name: Optional[str]
    font_size: float
    font_color: str
    alignment: str
    vertical_alignment: str
    line_height: float
    character_spacing: float
    background_color: Optional[str]


def text_style(schema: Schema) -> TextStyle:
    return TextStyle(
        font_name=schema.get("fontName"),
        font_size=schema.get("fontSize", DEFAULT_FONT_SIZE),
        font_color=schema.get("fontColor") or DEFAULT_FONT_COLOR,
        alignment=schema.get("alignment", DEFAULT_ALIGNMENT),
        vertical_alignment=schema.get("verticalAlignment", DEFAULT_VERTICAL_ALIGNMENT),
        line_height=schema.get("lineHeight", DEFAULT_LINE_HEIGHT),
        character_spacing=schema.get("characterSpacing", DEFAULT_CHARACTER_SPACING),
        background_color=optional_color(schema.get("backgroundColor")),
    )


def resolve_font_size(ctx: RenderContext, text: str, style: TextStyle) -> float:
    """
    Font size to draw with.

    With ``dynamicFontSize: {min, max}`` the largest size whose wrapped
    text fits the box is used; the search is memoised per (schema, text).
    """
    dynamic = ctx.schema.get("dynamicFontSize")
    if not dynamic or not text:
        return style.font_size

    schema = ctx.schema
    key = make_cache_key(
        "fit-font-size", text, schema.width, schema.height, style.font_name,
        style.line_height, style.character_spacing, dynamic,
    )
    return ctx.cache.get_or_compute(
        key,
        lambda: fit_font_size(
            text,
            schema.width,
            schema.height,
            fonts=ctx.fonts,
            font_name=style.font_name,
            min_size=dynamic.get("min", style.font_size),
            max_size=dynamic.get("max", style.font_size),
            line_height=style.line_height,
            character_spacing=style.character_spacing,
        ),
    )


def draw_text(ctx: RenderContext, text: str) -> List[Primitive]:
    """
    Lay out text in the schema box and return its primitives.

    The background (if any) comes first, then one TextRun per line.
    """
    schema = ctx.schema
    style = text_style(schema)
    common = primitive_common(schema)
    primitives: List[Primitive] = []

    if style.background_color:
        primitives.append(Rectangle(
            x=schema.position.x,
            y=schema.position.y,
            width=schema.width,
            height=schema.height,
            fill_color=style.background_color,
            **common,
        ))

    if not text:
        return primitives

    font_size = resolve_font_size(ctx, text, style)
    font_name = ctx.fonts.resolve(style.font_name)
    lines = split_text_to_lines(
        text,
        schema.width,
        fonts=ctx.fonts,
        font_name=style.font_name,
        font_size=font_size,
        character_spacing=style.character_spacing,
    )

    row_height = line_height_mm(font_size, style.line_height)
    block_height = len(lines) * row_height
    if style.vertical_alignment == "middle":
        top = schema.position.y + (schema.height - block_height) / 2
    elif style.vertical_alignment == "bottom":
        top = schema.position.y + schema.height - block_height
    else:
        top = schema.position.y

    # Centre the glyph box within each line, then drop to the baseline.
    baseline_offset = (row_height - pt2mm(font_size)) / 2 + pt2mm(ctx.fonts.ascent(style.font_name, font_size))

    for i, line in enumerate(lines):
        if not line:
            continue
        line_width = pt2mm(text_width_pt(line, ctx.fonts, style.font_name, font_size, style.character_spacing))
        if style.alignment == "center":
            x = schema.position.x + (schema.width - line_width) / 2
        elif style.alignment == "right":
            x = schema.position.x + schema.width - line_width
        else:
            x = schema.position.x
        primitives.append(TextRun(
            text=line,
            x=x,
            y=top + i * row_height + baseline_offset,
            font_name=font_name,
            font_size=font_size,
            color=style.font_color,
            character_spacing=style.character_spacing,
            **common,
        ))

    return primitives


def text_content_height(text: str, schema: Schema, fonts) -> float:
    """Height in mm of text wrapped to the schema width at its static font size."""
    style = text_style(schema)
    lines = split_text_to_lines(
        text,
        schema.width,
        fonts=fonts,
        font_name=style.font_name,
        font_size=style.font_size,
        character_spacing=style.character_spacing,
    )
    return text_block_height(len(lines), style.font_size, style.line_height)
