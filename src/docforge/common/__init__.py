"""Common utilities shared across docforge."""

from __future__ import annotations

from .units import (
    MM_TO_PT_RATIO,
    PT_TO_MM_RATIO,
    PT_TO_PX_RATIO,
    ZOOM,
    mm2pt,
    pt2mm,
    pt2px,
    px2pt,
    mm2px,
    px2mm,
)
from .colors import is_hex_valid, hex_to_rgb, optional_color
from .fonts import FontSet, DEFAULT_FONT_NAME, STANDARD_FONTS

__all__ = [
    # units
    "MM_TO_PT_RATIO",
    "PT_TO_MM_RATIO",
    "PT_TO_PX_RATIO",
    "ZOOM",
    "mm2pt",
    "pt2mm",
    "pt2px",
    "px2pt",
    "mm2px",
    "px2mm",
    # colors
    "is_hex_valid",
    "hex_to_rgb",
    "optional_color",
    # fonts
    "FontSet",
    "DEFAULT_FONT_NAME",
    "STANDARD_FONTS",
]
