"""
Module: plugins.graphics

Purpose:
    Raster field types. image and signature take a base64 data-URI value
    (PNG or JPEG) and size it with the header probe, so a malformed image
    fails the generation call before anything is written. svg takes SVG
    markup, rasterised with cairosvg and then placed like an image.

Key Objects:
    - image: Image fitted inside the box, aspect preserved, centred
    - signature: Image stretched to the box with optional background/border
    - svg: SVG drawing fitted inside the box, aspect preserved, centred

Dependencies:
    - images.probe: Dimensions and data-URI decoding
    - cairosvg: SVG rendering
"""

from __future__ import annotations

import math
from typing import List, Tuple

import cairosvg

from docforge.common.colors import optional_color
from docforge.common.units import mm2pt
from docforge.core.errors import InvalidFieldValue
from docforge.core.models import ImagePlacement, Primitive, Rectangle, Schema
from docforge.images import decode_image_data_uri, probe_image_size
from docforge.plugins.registry import Plugin, RenderContext
from docforge.plugins.utils import as_text, primitive_common


def fit_contain(
    box_width: float, box_height: float, image_width: float, image_height: float
) -> Tuple[float, float]:
    """
    Largest (width, height) with the image's aspect ratio that fits the box.

    Example:
        >>> fit_contain(100, 50, 400, 400)
        (50.0, 50.0)
    """
    if image_width <= 0 or image_height <= 0:
        return float(box_width), float(box_height)
    scale = min(box_width / image_width, box_height / image_height)
    return image_width * scale, image_height * scale


def _image_pdf(ctx: RenderContext) -> List[Primitive]:
    value = as_text(ctx.value)
    if not value:
        return []
    schema = ctx.schema
    data = decode_image_data_uri(value, schema.name)
    size = probe_image_size(data)

    width, height = fit_contain(schema.width, schema.height, size.width, size.height)
    return [ImagePlacement(
        data=data,
        x=schema.position.x + (schema.width - width) / 2,
        y=schema.position.y + (schema.height - height) / 2,
        width=width,
        height=height,
        **primitive_common(schema),
    )]


def _check_image_value(value, schema: Schema):
    text = as_text(value)
    if not text:
        return None
    try:
        probe_image_size(decode_image_data_uri(text, schema.name))
    except ValueError as exc:
        return str(exc)
    return None


image = Plugin(
    pdf=_image_pdf,
    default_schema={
        "type": "image",
        "content": "",
        "position": {"x": 0, "y": 0},
        "width": 40,
        "height": 40,
        "rotation": 0,
        "opacity": 1,
    },
    check_value=_check_image_value,
)


def _signature_pdf(ctx: RenderContext) -> List[Primitive]:
    value = as_text(ctx.value)
    if not value:
        return []
    schema = ctx.schema
    common = primitive_common(schema)
    data = decode_image_data_uri(value, schema.name)
    probe_image_size(data)

    primitives: List[Primitive] = []
    background = optional_color(schema.get("backgroundColor"))
    if background:
        primitives.append(Rectangle(
            x=schema.position.x, y=schema.position.y,
            width=schema.width, height=schema.height,
            fill_color=background, **common,
        ))

    primitives.append(ImagePlacement(
        data=data,
        x=schema.position.x,
        y=schema.position.y,
        width=schema.width,
        height=schema.height,
        **common,
    ))

    border_color = optional_color(schema.get("borderColor"))
    border_width = schema.get("borderWidth", 0) or 0
    if border_color and border_width > 0:
        primitives.append(Rectangle(
            x=schema.position.x, y=schema.position.y,
            width=schema.width, height=schema.height,
            stroke_color=border_color, stroke_width=border_width, **common,
        ))
    return primitives


signature = Plugin(
    pdf=_signature_pdf,
    default_schema={
        "type": "signature",
        "content": "",
        "position": {"x": 0, "y": 0},
        "width": 62.5,
        "height": 37.5,
        "rotation": 0,
        "opacity": 1,
        "backgroundColor": "",
        "borderColor": "",
        "borderWidth": 0,
    },
    check_value=_check_image_value,
)


# Raster density for SVG fields, in pixels per point (about 300 DPI)
SVG_RASTER_SCALE = 300 / 72


def rasterize_svg(markup: str, width_mm: float, schema_name: str = "") -> bytes:
    """
    Render SVG markup to PNG bytes sized for a box width_mm wide.

    The drawing keeps its own aspect ratio; only the output width is fixed.

    Raises:
        InvalidFieldValue: If the markup is not a renderable SVG document
    """
    output_width = max(1, math.ceil(mm2pt(width_mm) * SVG_RASTER_SCALE))
    try:
        return cairosvg.svg2png(bytestring=markup.encode("utf-8"), output_width=output_width)
    except (ValueError, SyntaxError) as exc:
        raise InvalidFieldValue(f"Value is not a renderable SVG document: {exc}", schema_name) from exc


def _svg_pdf(ctx: RenderContext) -> List[Primitive]:
    markup = as_text(ctx.value).strip()
    if not markup:
        return []
    schema = ctx.schema
    data = rasterize_svg(markup, schema.width, schema.name)
    size = probe_image_size(data)

    width, height = fit_contain(schema.width, schema.height, size.width, size.height)
    return [ImagePlacement(
        data=data,
        x=schema.position.x + (schema.width - width) / 2,
        y=schema.position.y + (schema.height - height) / 2,
        width=width,
        height=height,
        **primitive_common(schema),
    )]


def _check_svg_value(value, schema: Schema):
    markup = as_text(value).strip()
    if not markup:
        return None
    try:
        rasterize_svg(markup, schema.width, schema.name)
    except InvalidFieldValue as exc:
        return str(exc)
    return None


svg = Plugin(
    pdf=_svg_pdf,
    default_schema={
        "type": "svg",
        "content": (
            '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24">'
            '<circle cx="12" cy="12" r="10" fill="none" stroke="#000000" stroke-width="2"/></svg>'
        ),
        "position": {"x": 0, "y": 0},
        "width": 40,
        "height": 40,
        "rotation": 0,
        "opacity": 1,
        "readOnly": True,
    },
    check_value=_check_svg_value,
)
