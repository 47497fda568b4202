"""
Module: generator.layout.paginator

Purpose:
    Reflow one record's template onto pages once content-dependent
    heights are known. Tables that outgrow the page are split into
    segments that continue on new pages.

Key Functions:
    - dynamic_heights(): Heights of a schema for a value
    - paginate_record(): Template + values -> LayoutResult (blank base)
    - fixed_layout(): One output page per template page (custom base)
    - get_dynamic_template(): Reflowed Template for one record

Algorithm:
    Per template page, schemas are placed in ascending y:
    1. Shift a schema down by the largest displacement of any schema
       already placed whose original box ends at or above its top
    2. Single boxes that were shifted move whole to the next page when
       they cross the content bottom; unshifted ones stay put
    3. Tables are placed row by row; a row crossing the content bottom
       starts a new segment at the next page's content top, repeating
       the header when it is shown. The header always travels with the
       first row.
    4. Every template page expands into one or more output pages, with
       schemas in declaration order

    Positions are tracked on a virtual strip of pages: an absolute y of
    ``k * page_height + y`` is y on the k-th page.

Dependencies:
    - generator.layout.models: SchemaPlacement, PagePlan, LayoutResult
    - plugins.registry: Dynamic-height hooks

Used By:
    - generator.controller: Main generation loop
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from docforge.common.fonts import FontSet
from docforge.core.cache import ComputationCache
from docforge.core.models import BodyRange, PageGeometry, Position, Schema, Template, is_blank_pdf
from docforge.plugins.registry import PluginRegistry

from .models import LayoutResult, PagePlan, SchemaPlacement

logger = logging.getLogger(__name__)

# Types whose rows may be split across pages.
SPLITTABLE_TYPES = frozenset({"table"})

# Shifts smaller than this are rounding noise.
EPSILON = 1e-9

ValueOf = Callable[[Schema], Any]
# (output page offset, positioned schema)
_Placed = Tuple[int, Schema]


def dynamic_heights(
    schema: Schema,
    value: Any,
    *,
    registry: PluginRegistry,
    page: PageGeometry,
    fonts: FontSet,
    cache: ComputationCache,
) -> List[float]:
    """Heights from the schema's dynamic-height hook, or ``[height]`` without one."""
    plugin = registry.find(schema.type)
    if plugin.get_dynamic_heights is None:
        return [schema.height]
    return list(plugin.get_dynamic_heights(value, schema, page=page, fonts=fonts, cache=cache))


def _to_page(abs_y: float, geometry: PageGeometry) -> Tuple[int, float]:
    """Split an absolute strip position into (page offset, y on that page)."""
    page = max(int(abs_y // geometry.height), 0)
    y = abs_y - page * geometry.height
    if page > 0 and y < geometry.content_top:
        y = geometry.content_top
    return page, y


def _place_single(
    schema: Schema,
    heights: Sequence[float],
    shift: float,
    geometry: PageGeometry,
) -> Tuple[List[_Placed], float]:
    height = float(sum(heights))
    if shift == 0:
        page, y = 0, schema.position.y
    else:
        page, y = _to_page(schema.position.y + shift, geometry)
        if y + height > geometry.content_bottom and y > geometry.content_top:
            page, y = page + 1, geometry.content_top

    placed = schema.with_changes(position=Position(schema.position.x, y), height=height)
    return [(page, placed)], page * geometry.height + y + height


def _place_table(
    schema: Schema,
    heights: Sequence[float],
    shift: float,
    geometry: PageGeometry,
    warnings: List[str],
) -> Tuple[List[_Placed], float]:
    head = heights[0] if heights else 0.0
    rows = list(heights[1:])
    bottom = geometry.content_bottom

    if shift == 0:
        page, y = 0, schema.position.y
    else:
        page, y = _to_page(schema.position.y + shift, geometry)

    # Never leave the header alone at a page bottom.
    first_block = head + (rows[0] if rows else 0.0)
    if y + first_block > bottom and y > geometry.content_top:
        page, y = page + 1, geometry.content_top

    segments: List[Tuple[int, float, int, int, float]] = []
    segment_top, cursor, segment_start = y, y + head, 0
    for i, row_height in enumerate(rows):
        if cursor + row_height > bottom and i > segment_start:
            segments.append((page, segment_top, segment_start, i, cursor - segment_top))
            page += 1
            segment_top = geometry.content_top
            cursor = segment_top + head
            segment_start = i
        if cursor + row_height > bottom:
            message = (
                f"Row {i} of table {schema.name!r} is taller than the page content area "
                f"({row_height:.1f}mm needed, {bottom - cursor:.1f}mm available)"
            )
            logger.warning(message)
            warnings.append(message)
        cursor += row_height
    segments.append((page, segment_top, segment_start, len(rows), cursor - segment_top))

    base = schema.body_range.start if schema.body_range else 0
    placed: List[_Placed] = []
    for seg_page, top, start, end, height in segments:
        body_range = schema.body_range if len(segments) == 1 else BodyRange(base + start, base + end)
        placed.append((seg_page, schema.with_changes(
            position=Position(schema.position.x, top),
            height=height,
            body_range=body_range,
        )))
    if len(segments) > 1:
        logger.debug(f"Split table {schema.name!r} into {len(segments)} segments")
    return placed, page * geometry.height + cursor


def _paginate_page(
    schemas: Sequence[Schema],
    value_of: ValueOf,
    geometry: PageGeometry,
    *,
    registry: PluginRegistry,
    fonts: FontSet,
    cache: ComputationCache,
    warnings: List[str],
) -> List[Tuple[int, SchemaPlacement]]:
    ordered = sorted(enumerate(schemas), key=lambda item: (item[1].position.y, item[0]))
    # (original bottom, displacement of the placed box's bottom)
    placed_boxes: List[Tuple[float, float]] = []
    result: List[Tuple[int, SchemaPlacement]] = []

    for order, schema in ordered:
        shifts = [d for box_bottom, d in placed_boxes if box_bottom <= schema.position.y]
        shift = max(shifts) if shifts else 0.0
        if abs(shift) < EPSILON:
            shift = 0.0

        heights = dynamic_heights(
            schema, value_of(schema), registry=registry, page=geometry, fonts=fonts, cache=cache
        )
        if schema.type in SPLITTABLE_TYPES:
            items, end = _place_table(schema, heights, shift, geometry, warnings)
        else:
            items, end = _place_single(schema, heights, shift, geometry)

        result.extend((page, SchemaPlacement(placed, order)) for page, placed in items)
        placed_boxes.append((schema.bottom, end - schema.bottom))
    return result


def paginate_record(
    template: Template,
    value_of: ValueOf,
    *,
    registry: PluginRegistry,
    fonts: FontSet,
    cache: ComputationCache,
) -> LayoutResult:
    """
    Lay out one record's template on blank pages.

    Args:
        template: Template on a blank base
        value_of: Resolved value of a schema for this record
        registry: Plugins providing dynamic-height hooks
        fonts: Font set for measurement
        cache: Call-scoped computation cache

    Returns:
        LayoutResult with one or more output pages per template page

    Raises:
        ValueError: If the template has a custom base document
    """
    if not is_blank_pdf(template.base_pdf):
        raise ValueError("Only templates on a blank base can be paginated")

    geometry = PageGeometry.from_blank(template.base_pdf)
    pages: List[PagePlan] = []
    warnings: List[str] = []

    for template_page, schemas in enumerate(template.schemas):
        placed = _paginate_page(
            schemas, value_of, geometry,
            registry=registry, fonts=fonts, cache=cache, warnings=warnings,
        )
        page_total = max((page for page, _ in placed), default=0) + 1
        for offset in range(page_total):
            on_page = sorted((p for page, p in placed if page == offset), key=lambda p: p.order)
            pages.append(PagePlan(
                index=len(pages),
                template_page=template_page,
                geometry=geometry,
                placements=tuple(on_page),
            ))

    logger.debug(f"Paginated {template.page_count} template pages onto {len(pages)} pages")
    return LayoutResult(pages=tuple(pages), warnings=warnings)


def fixed_layout(template: Template, geometries: Sequence[PageGeometry]) -> LayoutResult:
    """One output page per template page with schemas unchanged (custom base documents)."""
    pages = tuple(
        PagePlan(
            index=i,
            template_page=i,
            geometry=geometries[i],
            placements=tuple(SchemaPlacement(schema, order) for order, schema in enumerate(schemas)),
        )
        for i, schemas in enumerate(template.schemas)
    )
    return LayoutResult(pages=pages)


def record_value_of(record: Mapping[str, Any]) -> ValueOf:
    """Plain value lookup: read-only content, else the record value ('' when missing)."""
    def value_of(schema: Schema) -> Any:
        if schema.read_only:
            return schema.content if schema.content is not None else ""
        return record.get(schema.name, "")
    return value_of


def get_dynamic_template(
    template: Template,
    record: Mapping[str, Any],
    *,
    registry: PluginRegistry,
    fonts: Optional[FontSet] = None,
    cache: Optional[ComputationCache] = None,
) -> Template:
    """
    Template reflowed for one record (one template page per output page).

    Templates on a custom base document are returned unchanged.

    Example:
        >>> dynamic = get_dynamic_template(template, {"items": rows}, registry=default_registry())
        >>> dynamic.page_count >= template.page_count
        True
    """
    if not is_blank_pdf(template.base_pdf):
        return template
    layout = paginate_record(
        template,
        record_value_of(record),
        registry=registry,
        fonts=fonts or FontSet.standard(),
        cache=cache if cache is not None else ComputationCache(),
    )
    return layout.to_template(template.base_pdf)
