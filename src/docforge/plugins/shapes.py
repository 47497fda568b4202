"""
Module: plugins.shapes

Purpose:
    Static vector field types: line, rectangle and ellipse. They ignore
    their value and draw from schema styling only.
"""

from __future__ import annotations

from typing import List

from docforge.common.colors import optional_color
from docforge.core.models import Ellipse, Line, Primitive, Rectangle
from docforge.plugins.registry import Plugin, RenderContext
from docforge.plugins.utils import primitive_common


def _line_pdf(ctx: RenderContext) -> List[Primitive]:
    # Horizontal rule through the box centre; box height is the thickness.
    schema = ctx.schema
    y = schema.position.y + schema.height / 2
    return [Line(
        x1=schema.position.x,
        y1=y,
        x2=schema.position.x + schema.width,
        y2=y,
        color=schema.get("color") or "#000000",
        stroke_width=schema.height,
        **primitive_common(schema),
    )]


def _shape_box(ctx: RenderContext):
    """Box inset by half the border so the stroke stays inside the schema box."""
    schema = ctx.schema
    border = schema.get("borderWidth", 0) or 0
    stroke = optional_color(schema.get("borderColor")) if border > 0 else None
    inset = border / 2 if stroke else 0
    return dict(
        x=schema.position.x + inset,
        y=schema.position.y + inset,
        width=max(schema.width - 2 * inset, 0),
        height=max(schema.height - 2 * inset, 0),
        fill_color=optional_color(schema.get("color")),
        stroke_color=stroke,
        stroke_width=border if stroke else 0,
        **primitive_common(schema),
    )


def _rectangle_pdf(ctx: RenderContext) -> List[Primitive]:
    return [Rectangle(**_shape_box(ctx))]


def _ellipse_pdf(ctx: RenderContext) -> List[Primitive]:
    return [Ellipse(**_shape_box(ctx))]


_SHAPE_DEFAULTS = {
    "position": {"x": 0, "y": 0},
    "width": 62.5,
    "height": 37.5,
    "rotation": 0,
    "opacity": 1,
    "borderWidth": 1,
    "borderColor": "#000000",
    "color": "",
    "readOnly": True,
    "required": False,
}

line = Plugin(
    pdf=_line_pdf,
    default_schema={
        "type": "line",
        "position": {"x": 0, "y": 0},
        "width": 50,
        "height": 1,
        "rotation": 0,
        "opacity": 1,
        "color": "#000000",
        "readOnly": True,
        "required": False,
    },
)

rectangle = Plugin(pdf=_rectangle_pdf, default_schema={**_SHAPE_DEFAULTS, "type": "rectangle"})

ellipse = Plugin(pdf=_ellipse_pdf, default_schema={**_SHAPE_DEFAULTS, "type": "ellipse"})
