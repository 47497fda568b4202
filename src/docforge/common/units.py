"""Unit conversion between millimetres, PDF points and device pixels.

Templates are authored in millimetres, the output sink works in PDF
points (1/72 inch) and previews work in pixels. Every function here is
pure and total over the reals: negative and zero values convert like any
other number and nothing is clamped.
"""

from __future__ import annotations

MM_PER_INCH = 25.4
PT_PER_INCH = 72.0
PX_PER_INCH = 96.0

MM_TO_PT_RATIO = PT_PER_INCH / MM_PER_INCH
PT_TO_MM_RATIO = MM_PER_INCH / PT_PER_INCH
PT_TO_PX_RATIO = PX_PER_INCH / PT_PER_INCH

# Pixels per millimetre at 96 DPI, the zoom used by browser previews.
ZOOM = PX_PER_INCH / MM_PER_INCH


def mm2pt(mm: float) -> float:
    """Convert millimetres to PDF points."""
    return mm * MM_TO_PT_RATIO


def pt2mm(pt: float) -> float:
    """Convert PDF points to millimetres (exact inverse of mm2pt)."""
    return pt / MM_TO_PT_RATIO


def pt2px(pt: float, scale: float = PT_TO_PX_RATIO) -> float:
    """
    Convert PDF points to pixels.

    Args:
        pt: Length in points
        scale: Pixels per point (default 96/72, i.e. 96 DPI)

    Returns:
        Length in pixels
    """
    return pt * scale


def px2pt(px: float, scale: float = PT_TO_PX_RATIO) -> float:
    """Convert pixels to PDF points (inverse of pt2px for the same scale)."""
    return px / scale


def mm2px(mm: float, scale: float = PT_TO_PX_RATIO) -> float:
    """Convert millimetres to pixels via points."""
    return pt2px(mm2pt(mm), scale)


def px2mm(px: float, scale: float = PT_TO_PX_RATIO) -> float:
    """
    Convert pixels to millimetres via points.

    Example:
        >>> round(px2mm(mm2px(10.0, 2.0), 2.0), 9)
        10.0
    """
    return pt2mm(px2pt(px, scale))
