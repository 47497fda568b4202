"""
Module: plugins.table.render

Purpose:
    Draw a table instance (header, the rows selected by its bodyRange,
    and the outer border) as primitives.

Key Functions:
    - draw_table(): RenderContext -> primitives
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from docforge.common.units import pt2mm
from docforge.core.models import Line, Primitive, Rectangle, TextRun
from docforge.plugins.registry import RenderContext
from docforge.plugins.text.measure import line_height_mm, text_width_pt
from docforge.plugins.utils import primitive_common

from .layout import CellLayout, RowLayout, create_single_table, parse_table_value
from .styles import table_border


def _cell_background(cell: CellLayout, row: RowLayout) -> Optional[str]:
    style = cell.style
    if not row.is_head and row.index % 2 == 1 and style.alternate_background_color:
        return style.alternate_background_color
    return style.background_color


def _draw_cell(
    ctx: RenderContext,
    cell: CellLayout,
    row: RowLayout,
    x: float,
    y: float,
    common: Dict[str, Any],
) -> List[Primitive]:
    style = cell.style
    primitives: List[Primitive] = []
    height = row.height

    background = _cell_background(cell, row)
    if background:
        primitives.append(Rectangle(x=x, y=y, width=cell.width, height=height, fill_color=background, **common))

    border = style.border_width
    if style.border_color:
        right, bottom = x + cell.width, y + height
        sides = (
            (border.top, x, y, right, y),
            (border.right, right, y, right, bottom),
            (border.bottom, x, bottom, right, bottom),
            (border.left, x, y, x, bottom),
        )
        for width, x1, y1, x2, y2 in sides:
            if width > 0:
                primitives.append(Line(
                    x1=x1, y1=y1, x2=x2, y2=y2, color=style.border_color, stroke_width=width, **common
                ))

    row_height = line_height_mm(style.font_size, style.line_height)
    block = len(cell.lines) * row_height
    inner_top = y + style.padding.top
    inner_height = height - style.padding.vertical
    if style.vertical_alignment == "middle":
        top = inner_top + (inner_height - block) / 2
    elif style.vertical_alignment == "bottom":
        top = inner_top + inner_height - block
    else:
        top = inner_top

    font_name = ctx.fonts.resolve(style.font_name)
    baseline = (row_height - pt2mm(style.font_size)) / 2 + pt2mm(ctx.fonts.ascent(style.font_name, style.font_size))
    inner_left = x + style.padding.left
    inner_width = cell.width - style.padding.horizontal

    for i, line in enumerate(cell.lines):
        if not line:
            continue
        line_width = pt2mm(text_width_pt(line, ctx.fonts, style.font_name, style.font_size, style.character_spacing))
        if style.alignment == "center":
            line_x = inner_left + (inner_width - line_width) / 2
        elif style.alignment == "right":
            line_x = inner_left + inner_width - line_width
        else:
            line_x = inner_left
        primitives.append(TextRun(
            text=line,
            x=line_x,
            y=top + i * row_height + baseline,
            font_name=font_name,
            font_size=style.font_size,
            color=style.font_color,
            character_spacing=style.character_spacing,
            **common,
        ))
    return primitives


def draw_table(ctx: RenderContext) -> List[Primitive]:
    """
    Draw the table instance described by ctx.schema.

    Alternate row shading follows the absolute body row index, so a
    table split across pages keeps its stripe pattern.
    """
    schema = ctx.schema
    body = parse_table_value(ctx.value, schema)
    table = create_single_table(body, schema, fonts=ctx.fonts, cache=ctx.cache)
    common = primitive_common(schema)

    rows: List[RowLayout] = list(table.body_rows(schema.body_range))
    if schema.shows_head:
        rows.insert(0, table.head)

    primitives: List[Primitive] = []
    y = schema.position.y
    for row in rows:
        for cell in row.cells:
            primitives.extend(_draw_cell(ctx, cell, row, schema.position.x + cell.x, y, common))
        y += row.height

    border = table_border(schema)
    drawn_height = y - schema.position.y
    if border.color and border.width > 0 and drawn_height > 0:
        primitives.append(Rectangle(
            x=schema.position.x,
            y=schema.position.y,
            width=table.width,
            height=drawn_height,
            stroke_color=border.color,
            stroke_width=border.width,
            **common,
        ))
    return primitives
