"""
Models Package

Template models and draw primitives.
"""

from .geometry import PageGeometry
from .template import (
    Position,
    BodyRange,
    Schema,
    BlankPdf,
    CustomPdf,
    BasePdf,
    Template,
    decode_base64_payload,
    is_blank_pdf,
)
from .primitives import (
    Primitive,
    PRIMITIVE_TYPES,
    TextRun,
    ImagePlacement,
    Line,
    Rectangle,
    Ellipse,
    Barcode,
)

__all__ = [
    # Geometry
    "PageGeometry",
    # Template
    "Position",
    "BodyRange",
    "Schema",
    "BlankPdf",
    "CustomPdf",
    "BasePdf",
    "Template",
    "decode_base64_payload",
    "is_blank_pdf",
    # Primitives
    "Primitive",
    "PRIMITIVE_TYPES",
    "TextRun",
    "ImagePlacement",
    "Line",
    "Rectangle",
    "Ellipse",
    "Barcode",
]
