"""
Module: common.fonts

Purpose:
    Read-only font set used for text measurement and output.
    Maps template font names to fonts registered with ReportLab.
    Discovering and registering TrueType files is left to the caller.

Key Classes:
    - FontSet: Font name resolution and metrics

Dependencies:
    - reportlab.pdfbase.pdfmetrics: String widths and ascent

Used By:
    - plugins.text: Line wrapping and baseline placement
    - plugins.table: Cell height computation
    - core.schemas.validator: Unknown font name checks
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from reportlab.pdfbase import pdfmetrics

DEFAULT_FONT_NAME = "Helvetica"

# The standard 14 PDF fonts are always available to ReportLab.
STANDARD_FONTS = (
    "Helvetica",
    "Helvetica-Bold",
    "Helvetica-Oblique",
    "Helvetica-BoldOblique",
    "Times-Roman",
    "Times-Bold",
    "Times-Italic",
    "Times-BoldItalic",
    "Courier",
    "Courier-Bold",
    "Courier-Oblique",
    "Courier-BoldOblique",
    "Symbol",
    "ZapfDingbats",
)


@dataclass(frozen=True)
class FontSet:
    """
    Font lookup for one generation call (immutable).

    Attributes:
        fonts: Template font name -> ReportLab font name
        fallback: Name used when a schema names no font

    Example:
        >>> fonts = FontSet.standard()
        >>> fonts.resolve(None)
        'Helvetica'
        >>> fonts.string_width("abc", "Courier", 10) == 3 * 6.0
        True
    """

    fonts: Mapping[str, str] = field(default_factory=dict)
    fallback: str = DEFAULT_FONT_NAME

    def __post_init__(self) -> None:
        object.__setattr__(self, "fonts", MappingProxyType(dict(self.fonts)))
        if self.fallback not in self.fonts and self.fallback not in STANDARD_FONTS:
            raise ValueError(f"Fallback font {self.fallback!r} is not in the font set")

    @classmethod
    def standard(cls, fallback: str = DEFAULT_FONT_NAME) -> "FontSet":
        """Font set containing the standard 14 PDF fonts."""
        return cls(fonts={name: name for name in STANDARD_FONTS}, fallback=fallback)

    def __contains__(self, name: object) -> bool:
        return name in self.fonts or name in STANDARD_FONTS

    def resolve(self, name: Optional[str]) -> str:
        """Map a template font name to its ReportLab name, falling back when unset."""
        if not name:
            return self.fonts.get(self.fallback, self.fallback)
        if name in self.fonts:
            return self.fonts[name]
        if name in STANDARD_FONTS:
            return name
        # Unknown names are reported by the template check; draw with the fallback.
        return self.fonts.get(self.fallback, self.fallback)

    def string_width(self, text: str, name: Optional[str], size: float) -> float:
        """Width of text in points."""
        return pdfmetrics.stringWidth(text, self.resolve(name), size)

    def ascent(self, name: Optional[str], size: float) -> float:
        """Ascent above the baseline in points."""
        ascent, _ = pdfmetrics.getAscentDescent(self.resolve(name), size)
        return ascent
