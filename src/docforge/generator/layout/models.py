"""
Module: generator.layout.models

Purpose:
    Data models for page layout.
    Immutable dataclasses representing positioned schemas and pages.

Key Classes:
    - SchemaPlacement: Schema positioned on an output page
    - PagePlan: Complete output page layout
    - LayoutResult: Final layout output for one record

Dependencies:
    - dataclasses (std)
    - core.models: Schema, PageGeometry, Template

Used By:
    - generator.layout.paginator: Creates PagePlans
    - generator.controller: Renders PagePlans
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from docforge.core.models import BasePdf, PageGeometry, Schema, Template


@dataclass(frozen=True)
class SchemaPlacement:
    """
    A schema positioned on an output page.

    Attributes:
        schema: Schema with final position, height and (for split
            tables) bodyRange
        order: Declaration index on the template page; placements on
            an output page are drawn in this order

    Example:
        >>> placement = SchemaPlacement(schema, order=0)
        >>> placement.bottom == schema.bottom
        True
    """

    schema: Schema
    order: int

    @property
    def bottom(self) -> float:
        """Bottom Y coordinate (top + height)."""
        return self.schema.bottom


@dataclass(frozen=True)
class PagePlan:
    """
    Complete layout plan for a single output page.

    Attributes:
        index: Output page number within the document (0-indexed)
        template_page: Template page this page was expanded from
        geometry: Page size and padding
        placements: Placements in drawing order
    """

    index: int
    template_page: int
    geometry: PageGeometry
    placements: tuple[SchemaPlacement, ...]

    @property
    def placement_count(self) -> int:
        """Number of schemas on this page."""
        return len(self.placements)

    @property
    def is_empty(self) -> bool:
        """Check if page has no placements."""
        return len(self.placements) == 0

    @property
    def schemas(self) -> tuple[Schema, ...]:
        return tuple(p.schema for p in self.placements)


@dataclass(frozen=True)
class LayoutResult:
    """
    Final layout output with diagnostics.

    Attributes:
        pages: Tuple of PagePlans in output order
        warnings: List of warning messages

    Example:
        >>> result = LayoutResult(pages=(page1, page2), warnings=[])
        >>> result.page_count
        2
    """

    pages: tuple[PagePlan, ...]
    warnings: List[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        """Number of pages."""
        return len(self.pages)

    def to_template(self, base_pdf: BasePdf) -> Template:
        """Template with one page per output page."""
        return Template(base_pdf=base_pdf, schemas=tuple(page.schemas for page in self.pages))
