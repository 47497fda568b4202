"""
Module: primitives

Purpose:
    Draw primitives - the atomic instructions handed to an output sink.
    Renderers emit them in template space (millimetres, origin at the
    page's top-left corner). The generator converts each one to PDF
    points exactly once, at the sink boundary, with to_points().

Key Classes:
    - TextRun: One line of text at a baseline
    - ImagePlacement: Raster image bytes in a target box
    - Line, Rectangle, Ellipse: Vector shapes
    - Barcode: Barcode or QR symbol drawn by the sink

Dependencies:
    - dataclasses (std)
    - common.units: mm -> pt

Used By:
    - plugins: Produce primitives
    - generator.controller: Converts to points
    - generator.output.renderer: Draws on a ReportLab canvas
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar, Optional, Tuple, Union

from docforge.common.units import mm2pt


@dataclass(frozen=True, kw_only=True)
class _Primitive:
    """
    Fields shared by all primitives.

    Attributes:
        schema_name: Schema that produced the primitive
        opacity: 0..1
        rotation: Clockwise degrees about ``pivot``
        pivot: Rotation centre (x, y), usually the schema box centre
    """

    # Fields holding lengths; scaled by to_points().
    LENGTH_FIELDS: ClassVar[Tuple[str, ...]] = ()

    schema_name: str = ""
    opacity: float = 1.0
    rotation: float = 0.0
    pivot: Optional[Tuple[float, float]] = None

    def to_points(self):
        """Copy with every length converted from mm to points."""
        changes = {name: mm2pt(getattr(self, name)) for name in self.LENGTH_FIELDS}
        if self.pivot is not None:
            changes["pivot"] = (mm2pt(self.pivot[0]), mm2pt(self.pivot[1]))
        return replace(self, **changes)

    @property
    def kind(self) -> str:
        return type(self).__name__


@dataclass(frozen=True, kw_only=True)
class TextRun(_Primitive):
    """
    One line of text.

    ``y`` is the baseline measured from the page top. ``font_size`` and
    ``character_spacing`` are always in points and are not scaled by
    to_points().
    """

    LENGTH_FIELDS: ClassVar[Tuple[str, ...]] = ("x", "y")

    text: str
    x: float
    y: float
    font_name: str
    font_size: float
    color: str = "#000000"
    character_spacing: float = 0.0


@dataclass(frozen=True, kw_only=True)
class ImagePlacement(_Primitive):
    """Decoded image bytes stretched into the box (x, y, width, height)."""

    LENGTH_FIELDS: ClassVar[Tuple[str, ...]] = ("x", "y", "width", "height")

    data: bytes
    x: float
    y: float
    width: float
    height: float

    def __repr__(self) -> str:
        return (
            f"ImagePlacement(schema_name={self.schema_name!r}, {len(self.data)} bytes, "
            f"x={self.x}, y={self.y}, width={self.width}, height={self.height})"
        )


@dataclass(frozen=True, kw_only=True)
class Line(_Primitive):
    LENGTH_FIELDS: ClassVar[Tuple[str, ...]] = ("x1", "y1", "x2", "y2", "stroke_width")

    x1: float
    y1: float
    x2: float
    y2: float
    color: str = "#000000"
    stroke_width: float = 0.1


@dataclass(frozen=True, kw_only=True)
class Rectangle(_Primitive):
    """Box with optional fill and optional stroke (None disables either)."""

    LENGTH_FIELDS: ClassVar[Tuple[str, ...]] = ("x", "y", "width", "height", "stroke_width")

    x: float
    y: float
    width: float
    height: float
    fill_color: Optional[str] = None
    stroke_color: Optional[str] = None
    stroke_width: float = 0.0


@dataclass(frozen=True, kw_only=True)
class Ellipse(_Primitive):
    """Ellipse inscribed in the box (x, y, width, height)."""

    LENGTH_FIELDS: ClassVar[Tuple[str, ...]] = ("x", "y", "width", "height", "stroke_width")

    x: float
    y: float
    width: float
    height: float
    fill_color: Optional[str] = None
    stroke_color: Optional[str] = None
    stroke_width: float = 0.0


@dataclass(frozen=True, kw_only=True)
class Barcode(_Primitive):
    """
    Barcode symbol scaled into the box.

    Attributes:
        symbology: ReportLab barcode name ("QR", "Code128", "EAN13", ...)
        value: Encoded payload (already validated)
        bar_color: Hex colour of the bars
        background_color: Optional hex fill behind the symbol
        include_text: Draw the human-readable text (linear codes only)
    """

    LENGTH_FIELDS: ClassVar[Tuple[str, ...]] = ("x", "y", "width", "height")

    symbology: str
    value: str
    x: float
    y: float
    width: float
    height: float
    bar_color: str = "#000000"
    background_color: Optional[str] = None
    include_text: bool = False


Primitive = Union[TextRun, ImagePlacement, Line, Rectangle, Ellipse, Barcode]

PRIMITIVE_TYPES = (TextRun, ImagePlacement, Line, Rectangle, Ellipse, Barcode)
