"""
Module: plugins.table.layout

Purpose:
    Measure a table: parse its value, wrap every cell, and compute row
    heights. The full-body layout is memoised in the call-scoped
    ComputationCache so that the pagination pass and the render pass
    (and every continuation segment of a split table) share one layout.

Key Classes:
    - CellLayout: Wrapped lines and size of one cell
    - RowLayout: Cells of one row and its height
    - TableLayout: Column widths, header row and all body rows

Key Functions:
    - parse_table_value(): JSON or list value -> rows of strings
    - create_single_table(): Memoised full-body layout
    - get_dynamic_heights_for_table(): Dynamic-height hook for tables

Dependencies:
    - plugins.text.measure: Wrapping and line heights
    - core.cache: Memo and height recording

Used By:
    - plugins.table.render
    - generator.layout.paginator (via the plugin hook)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from docforge.common.fonts import FontSet
from docforge.core.cache import ComputationCache, make_cache_key
from docforge.core.models import BodyRange, Schema
from docforge.plugins.text.measure import line_height_mm, split_text_to_lines
from docforge.plugins.utils import as_text, parse_json_value

from .styles import CellStyle, body_style, column_alignment, head_style

logger = logging.getLogger(__name__)

# Schema fields that never affect measured row heights.
_LAYOUT_IGNORED_FIELDS = frozenset({
    "name", "position", "height", "rotation", "opacity", "required",
    "readOnly", "content", "showHead", "bodyRange", "__bodyRange",
})

HEAD_ROW_INDEX = -1


@dataclass(frozen=True)
class CellLayout:
    """
    One measured cell.

    Attributes:
        text: Cell text
        lines: Wrapped lines
        x: Left edge relative to the table's left edge (mm)
        width: Column width (mm)
        height: Height the cell needs on its own (mm)
        style: Resolved cell style
    """

    text: str
    lines: Tuple[str, ...]
    x: float
    width: float
    height: float
    style: CellStyle


@dataclass(frozen=True)
class RowLayout:
    """A measured row. ``index`` is the body row index, or -1 for the header."""

    index: int
    cells: Tuple[CellLayout, ...]
    height: float

    @property
    def is_head(self) -> bool:
        return self.index == HEAD_ROW_INDEX


@dataclass(frozen=True)
class TableLayout:
    column_widths: Tuple[float, ...]
    head: RowLayout
    body: Tuple[RowLayout, ...]

    @property
    def width(self) -> float:
        return sum(self.column_widths)

    def body_rows(self, body_range: Optional[BodyRange]) -> Tuple[RowLayout, ...]:
        """Body rows selected by a range (all rows when None)."""
        if body_range is None:
            return self.body
        return tuple(body_range.slice(list(self.body)))


def parse_table_value(value: Any, schema: Schema) -> List[List[str]]:
    """
    Decode a table value into rows of strings.

    Accepts a JSON string or an already-decoded list of rows. Rows are
    padded or truncated to the header's column count.

    Raises:
        InvalidFieldValue: If the value is not a JSON list of lists
    """
    rows = parse_json_value(value, schema, list)
    columns = len(schema.get("head") or [])
    parsed: List[List[str]] = []
    for row in rows:
        cells = [as_text(cell) for cell in (row if isinstance(row, list) else [row])]
        if columns:
            cells = (cells + [""] * columns)[:columns]
        parsed.append(cells)
    return parsed


def column_widths(schema: Schema, columns: int) -> Tuple[float, ...]:
    """Column widths in mm from ``headWidthPercentages`` (equal split otherwise)."""
    if columns <= 0:
        return ()
    percentages = schema.get("headWidthPercentages") or []
    if len(percentages) != columns or sum(percentages) <= 0:
        return tuple(schema.width / columns for _ in range(columns))
    total = sum(percentages)
    return tuple(schema.width * p / total for p in percentages)


def layout_key(schema: Schema, body: Sequence[Sequence[str]]) -> str:
    """Cache key of a full-body layout: layout-relevant schema fields plus the value."""
    relevant = {
        k: v for k, v in schema.to_dict().items() if k not in _LAYOUT_IGNORED_FIELDS
    }
    return make_cache_key("table-layout", relevant, [list(row) for row in body])


def _measure_row(
    index: int,
    texts: Sequence[str],
    widths: Sequence[float],
    schema: Schema,
    base_style: CellStyle,
    fonts: FontSet,
) -> RowLayout:
    cells = []
    x = 0.0
    for column, width in enumerate(widths):
        text = texts[column] if column < len(texts) else ""
        style = base_style.with_alignment(column_alignment(schema, column))
        inner_width = max(width - style.padding.horizontal, 0)
        lines = split_text_to_lines(
            text,
            inner_width,
            fonts=fonts,
            font_name=style.font_name,
            font_size=style.font_size,
            character_spacing=style.character_spacing,
        )
        height = style.padding.vertical + len(lines) * line_height_mm(style.font_size, style.line_height)
        cells.append(CellLayout(text=text, lines=tuple(lines), x=x, width=width, height=height, style=style))
        x += width
    row_height = max((cell.height for cell in cells), default=0.0)
    return RowLayout(index=index, cells=tuple(cells), height=row_height)


def _build_table(body: Sequence[Sequence[str]], schema: Schema, fonts: FontSet) -> TableLayout:
    head_texts = [as_text(h) for h in (schema.get("head") or [])]
    columns = len(head_texts) or max((len(row) for row in body), default=0)
    widths = column_widths(schema, columns)

    head = _measure_row(HEAD_ROW_INDEX, head_texts, widths, schema, head_style(schema), fonts)
    style = body_style(schema)
    rows = tuple(_measure_row(i, row, widths, schema, style, fonts) for i, row in enumerate(body))
    logger.debug(f"Measured table {schema.name!r}: {len(rows)} rows, {columns} columns")
    return TableLayout(column_widths=widths, head=head, body=rows)


def create_single_table(
    body: Sequence[Sequence[str]],
    schema: Schema,
    *,
    fonts: FontSet,
    cache: ComputationCache,
) -> TableLayout:
    """
    Layout of the full table body, memoised per (layout fields, value).

    ``bodyRange`` and ``showHead`` are not part of the key: every segment
    of a split table reuses the same layout and slices it.
    """
    return cache.get_or_compute(
        layout_key(schema, body),
        lambda: _build_table(body, schema, fonts),
    )


def get_dynamic_heights_for_table(
    value: Any,
    schema: Schema,
    *,
    page=None,
    fonts: FontSet,
    cache: ComputationCache,
) -> List[float]:
    """
    Row heights of a table instance in mm.

    With the header shown the list is ``[head, row1, ...]``; otherwise
    ``[0, row1, ...]`` so that element 0 is always the header slot. An
    empty body with the header hidden yields ``[]``. Non-table schemas
    keep their static height.

    Raises:
        InvalidFieldValue: If the value is not a table
        CacheInconsistency: If the same instance measured differently before
    """
    if schema.type != "table":
        return [schema.height]

    body = parse_table_value(value, schema)
    table = create_single_table(body, schema, fonts=fonts, cache=cache)
    rows = [row.height for row in table.body_rows(schema.body_range)]

    if schema.shows_head:
        heights = [table.head.height] + rows
    elif rows:
        heights = [0.0] + rows
    else:
        heights = []

    range_key = schema.body_range.to_dict() if schema.body_range else None
    cache.record_heights(
        make_cache_key("table-heights", layout_key(schema, body), range_key, schema.shows_head),
        heights,
    )
    return heights
