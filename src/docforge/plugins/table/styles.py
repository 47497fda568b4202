"""
Module: plugins.table.styles

Purpose:
    Resolve table styling from a table schema: table border, header cell
    style, body cell style and per-column overrides.

Key Classes:
    - BoxWidths: Per-side lengths (borders, padding) in mm
    - CellStyle: Complete style of one cell
    - TableBorder: Outer border of the table

Key Functions:
    - head_style(), body_style(), table_border()
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from docforge.common.colors import optional_color
from docforge.core.models import Schema

HEAD_STYLE_DEFAULTS: Mapping[str, Any] = {
    "fontName": None,
    "fontSize": 13,
    "characterSpacing": 0,
    "alignment": "left",
    "verticalAlignment": "middle",
    "lineHeight": 1,
    "fontColor": "#ffffff",
    "borderColor": "",
    "backgroundColor": "#2980ba",
    "borderWidth": {"top": 0, "right": 0, "bottom": 0, "left": 0},
    "padding": {"top": 5, "right": 5, "bottom": 5, "left": 5},
}

BODY_STYLE_DEFAULTS: Mapping[str, Any] = {
    "fontName": None,
    "fontSize": 13,
    "characterSpacing": 0,
    "alignment": "left",
    "verticalAlignment": "middle",
    "lineHeight": 1,
    "fontColor": "#000000",
    "borderColor": "#888888",
    "backgroundColor": "",
    "alternateBackgroundColor": "#f5f5f5",
    "borderWidth": {"top": 0.1, "right": 0.1, "bottom": 0.1, "left": 0.1},
    "padding": {"top": 5, "right": 5, "bottom": 5, "left": 5},
}

TABLE_STYLE_DEFAULTS: Mapping[str, Any] = {"borderColor": "#000000", "borderWidth": 0.3}


@dataclass(frozen=True, slots=True)
class BoxWidths:
    """Lengths for the four sides of a box in mm."""

    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0

    @classmethod
    def from_value(cls, value: Any) -> "BoxWidths":
        """Accept a single number (all sides) or a {top,right,bottom,left} mapping."""
        if value is None:
            return cls()
        if isinstance(value, (int, float)):
            return cls(value, value, value, value)
        return cls(
            top=value.get("top", 0),
            right=value.get("right", 0),
            bottom=value.get("bottom", 0),
            left=value.get("left", 0),
        )

    @property
    def vertical(self) -> float:
        return self.top + self.bottom

    @property
    def horizontal(self) -> float:
        return self.left + self.right


@dataclass(frozen=True)
class CellStyle:
    font_name: Optional[str]
    font_size: float
    character_spacing: float
    alignment: str
    vertical_alignment: str
    line_height: float
    font_color: str
    border_color: Optional[str]
    background_color: Optional[str]
    alternate_background_color: Optional[str]
    border_width: BoxWidths
    padding: BoxWidths

    def with_alignment(self, alignment: Optional[str]) -> "CellStyle":
        if not alignment or alignment == self.alignment:
            return self
        return replace(self, alignment=alignment)


@dataclass(frozen=True, slots=True)
class TableBorder:
    color: Optional[str]
    width: float


def _merged(defaults: Mapping[str, Any], overrides: Optional[Mapping[str, Any]]) -> dict:
    merged = dict(defaults)
    merged.update(overrides or {})
    return merged


def _cell_style(data: Mapping[str, Any]) -> CellStyle:
    return CellStyle(
        font_name=data.get("fontName"),
        font_size=data.get("fontSize", 13),
        character_spacing=data.get("characterSpacing", 0),
        alignment=data.get("alignment", "left"),
        vertical_alignment=data.get("verticalAlignment", "middle"),
        line_height=data.get("lineHeight", 1),
        font_color=data.get("fontColor") or "#000000",
        border_color=optional_color(data.get("borderColor")),
        background_color=optional_color(data.get("backgroundColor")),
        alternate_background_color=optional_color(data.get("alternateBackgroundColor")),
        border_width=BoxWidths.from_value(data.get("borderWidth")),
        padding=BoxWidths.from_value(data.get("padding")),
    )


def head_style(schema: Schema) -> CellStyle:
    return _cell_style(_merged(HEAD_STYLE_DEFAULTS, schema.get("headStyles")))


def body_style(schema: Schema) -> CellStyle:
    return _cell_style(_merged(BODY_STYLE_DEFAULTS, schema.get("bodyStyles")))


def column_alignment(schema: Schema, column: int) -> Optional[str]:
    """Per-column alignment override from ``columnStyles.alignment``."""
    alignments = (schema.get("columnStyles") or {}).get("alignment") or {}
    return alignments.get(str(column), alignments.get(column))


def table_border(schema: Schema) -> TableBorder:
    data = _merged(TABLE_STYLE_DEFAULTS, schema.get("tableStyles"))
    return TableBorder(color=optional_color(data.get("borderColor")), width=data.get("borderWidth", 0) or 0)
