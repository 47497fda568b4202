"""
Module: geometry

Purpose:
    Resolved geometry of one output page: size and the padded content
    area that dynamic content must stay inside when it flows onto new
    pages. All values in millimetres.

Key Classes:
    - PageGeometry: Immutable page size plus padding

Used By:
    - plugins: Dynamic-height hooks and renderers
    - generator.layout.paginator: Page breaking
    - generator.controller: Page sizes handed to the sink
"""

from __future__ import annotations

from dataclasses import dataclass

from .template import BlankPdf


@dataclass(frozen=True, slots=True)
class PageGeometry:
    """
    Page size and padding in millimetres (immutable).

    Attributes:
        width: Page width
        height: Page height
        padding_top: Space above the content area
        padding_right: Space right of the content area
        padding_bottom: Space below the content area
        padding_left: Space left of the content area

    Example:
        >>> g = PageGeometry(width=210, height=297, padding_top=10, padding_bottom=20)
        >>> g.content_bottom, g.content_height
        (277, 267)
    """

    width: float
    height: float
    padding_top: float = 0
    padding_right: float = 0
    padding_bottom: float = 0
    padding_left: float = 0

    def __post_init__(self) -> None:
        """Validate geometry on construction."""
        if self.width <= 0:
            raise ValueError(f"page width must be positive: {self.width}")
        if self.height <= 0:
            raise ValueError(f"page height must be positive: {self.height}")
        if self.content_height <= 0:
            raise ValueError("Padding exceeds page height")
        if self.width - self.padding_left - self.padding_right <= 0:
            raise ValueError("Padding exceeds page width")

    @classmethod
    def from_blank(cls, base: BlankPdf) -> "PageGeometry":
        top, right, bottom, left = base.padding
        return cls(
            width=base.width,
            height=base.height,
            padding_top=top,
            padding_right=right,
            padding_bottom=bottom,
            padding_left=left,
        )

    @property
    def content_top(self) -> float:
        return self.padding_top

    @property
    def content_bottom(self) -> float:
        """Lowest y that dynamic content may reach."""
        return self.height - self.padding_bottom

    @property
    def content_height(self) -> float:
        return self.height - self.padding_top - self.padding_bottom
