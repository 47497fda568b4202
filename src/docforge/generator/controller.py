"""
Module: generator.controller

Purpose:
    Orchestrate a generation call.
    Validate → Resolve pages → per record: Layout → Render → Finalize

Key Functions:
    - generate(): Template + input records -> GenerationResult (in memory)
    - generate_pdf(): generate() + render_pdf(), optionally written to disk

Key Classes:
    - PageRender: Draw primitives (in points) for one output page
    - GenerationResult: Ordered pages plus warnings

Dependencies:
    - core.schemas: Validation
    - plugins: Registry and renderers
    - generator.layout: Pagination
    - generator.output: PDF writing

Used By:
    - cli: Command-line entry point
"""

from __future__ import annotations

import copy
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from docforge.common.fonts import FontSet
from docforge.common.units import mm2pt
from docforge.core.cache import ComputationCache
from docforge.core.errors import GenerationError
from docforge.core.models import (
    PageGeometry,
    Primitive,
    Schema,
    Template,
    is_blank_pdf,
)
from docforge.core.schemas import (
    ValidationError,
    check_inputs,
    check_template,
    raise_for_violations,
)
from docforge.core.utils import deserialize_template
from docforge.plugins import Plugin, PluginRegistry, RenderContext, default_registry

from .config import GeneratorConfig
from .layout import LayoutResult, fixed_layout, paginate_record
from .output.base_pdf import read_page_geometries
from .output.renderer import render_pdf
from .placeholders import placeholder_variables, replace_placeholders

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageRender:
    """
    One output page, ready for a sink (immutable).

    Attributes:
        record_index: Input record that produced the page
        page_index: Page number within that record's document (0-indexed)
        template_page: Template page the page was expanded from
        width: Page width in points
        height: Page height in points
        primitives: Draw primitives in points, in drawing order
    """

    record_index: int
    page_index: int
    template_page: int
    width: float
    height: float
    primitives: Tuple[Primitive, ...]

    @property
    def schema_names(self) -> Tuple[str, ...]:
        """Names of the schemas drawn on the page, in drawing order, without repeats."""
        names: List[str] = []
        for primitive in self.primitives:
            if not names or names[-1] != primitive.schema_name:
                names.append(primitive.schema_name)
        return tuple(names)


@dataclass(frozen=True)
class GenerationResult:
    """
    Complete generation result (immutable).

    Attributes:
        pages: Every output page, records in input order
        record_count: Number of input records
        warnings: Non-fatal validation and layout warnings

    Example:
        >>> result = generate(template, [{"name": "Ada"}])
        >>> print(f"Generated {result.page_count} pages")
    """

    pages: Tuple[PageRender, ...]
    record_count: int
    warnings: Tuple[str, ...] = ()

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def pages_for(self, record_index: int) -> Tuple[PageRender, ...]:
        """Pages of one record's document."""
        return tuple(p for p in self.pages if p.record_index == record_index)


PluginsArg = Union[None, PluginRegistry, Mapping[str, Plugin]]


def _registry(plugins: PluginsArg) -> PluginRegistry:
    if plugins is None:
        return default_registry()
    if isinstance(plugins, PluginRegistry):
        return plugins
    return PluginRegistry(plugins)


def _base_geometries(template: Template) -> Optional[List[PageGeometry]]:
    """Page geometries of a custom base document (None for a blank base)."""
    if is_blank_pdf(template.base_pdf):
        return None
    try:
        return read_page_geometries(template.base_pdf.data)
    except ValueError as exc:
        raise ValidationError(str(exc), path="basePdf") from exc


def _value_resolver(record: Mapping[str, Any], variables: Mapping[str, str]):
    """Value of a schema for this record; read-only content gets placeholders filled."""
    def value_of(schema: Schema) -> Any:
        if schema.read_only:
            content = schema.content if schema.content is not None else ""
            if isinstance(content, str):
                return replace_placeholders(content, variables)
            return content
        value = record.get(schema.name)
        return "" if value is None else value
    return value_of


def generate(
    template: Union[Template, Mapping[str, Any]],
    inputs: Sequence[Mapping[str, Any]],
    *,
    plugins: PluginsArg = None,
    fonts: Optional[FontSet] = None,
    config: Optional[GeneratorConfig] = None,
) -> GenerationResult:
    """
    Generate draw primitives for every record.

    Pipeline:
    1. Validate template and inputs (unknown types fail first)
    2. Resolve page geometries
    3. Per record: resolve values, paginate, render each page's schemas
       in declaration order, convert primitives to points
    4. Collect pages in record order

    Args:
        template: Parsed Template or template JSON
        inputs: Input records, one document each
        plugins: Registry or type -> Plugin mapping (built-ins when None)
        fonts: Font set (standard PDF fonts when None)
        config: Generation configuration

    Returns:
        GenerationResult with ordered pages

    Raises:
        UnknownSchemaType: If a schema type has no plugin
        ValidationError: On fatal violations (every violation in strict mode)
        InvalidFieldValue, ImageProbeError: If a value cannot be rendered
        CacheInconsistency: If one table measured differently twice
    """
    config = config or GeneratorConfig()
    fonts = fonts or FontSet.standard()
    registry = _registry(plugins)
    start_time = time.perf_counter()

    if not isinstance(template, Template):
        template = deserialize_template(template, strict=config.strict)

    # 1. Validate
    geometries = _base_geometries(template)
    violations = check_template(
        template,
        registry,
        fonts=fonts,
        base_page_count=len(geometries) if geometries is not None else None,
    )
    violations.extend(check_inputs(template, inputs, registry))
    registry.ensure_known(template)
    warnings = [str(v) for v in raise_for_violations(violations, strict=config.strict)]

    # Inputs are never modified in place.
    records: List[Dict[str, Any]] = copy.deepcopy([dict(record) for record in inputs])
    cache = ComputationCache()
    now = config.resolve_now()

    logger.info(f"Generating {len(records)} document(s) from a {template.page_count}-page template")

    pages: List[PageRender] = []
    for record_index, record in enumerate(records):
        variables = placeholder_variables(record, now=now, config=config)
        value_of = _value_resolver(record, variables)

        # 2. Layout
        if geometries is None:
            layout = paginate_record(template, value_of, registry=registry, fonts=fonts, cache=cache)
        else:
            layout = fixed_layout(template, geometries)
        warnings.extend(layout.warnings)

        # 3. Render
        pages.extend(_render_record(record_index, layout, value_of, registry, fonts, cache))
        logger.info(f"Record {record_index}: {layout.page_count} page(s)")

    elapsed = time.perf_counter() - start_time
    logger.info(f"Generated {len(pages)} page(s) in {elapsed:.2f}s ({cache.hit_rate})")

    return GenerationResult(pages=tuple(pages), record_count=len(records), warnings=tuple(warnings))


def _render_record(
    record_index: int,
    layout: LayoutResult,
    value_of,
    registry: PluginRegistry,
    fonts: FontSet,
    cache: ComputationCache,
) -> List[PageRender]:
    total_pages = layout.page_count
    rendered: List[PageRender] = []

    for page in layout.pages:
        primitives: List[Primitive] = []
        for placement in page.placements:
            schema = placement.schema
            value = value_of(schema)
            if schema.read_only and isinstance(value, str):
                value = replace_placeholders(
                    value, {}, current_page=page.index + 1, total_pages=total_pages
                )

            ctx = RenderContext(
                schema=schema,
                value=value,
                page=page.geometry,
                fonts=fonts,
                cache=cache,
                page_index=page.index,
                total_pages=total_pages,
            )
            drawn = registry.find(schema.type).pdf(ctx)
            logger.debug(f"Rendered {schema.type} {schema.name!r}: {len(drawn)} primitive(s)")
            # mm -> pt happens here, once.
            primitives.extend(p.to_points() for p in drawn)

        rendered.append(PageRender(
            record_index=record_index,
            page_index=page.index,
            template_page=page.template_page,
            width=mm2pt(page.geometry.width),
            height=mm2pt(page.geometry.height),
            primitives=tuple(primitives),
        ))
    return rendered


def generate_pdf(
    template: Union[Template, Mapping[str, Any]],
    inputs: Sequence[Mapping[str, Any]],
    *,
    output_path: Optional[Path] = None,
    plugins: PluginsArg = None,
    fonts: Optional[FontSet] = None,
    config: Optional[GeneratorConfig] = None,
) -> bytes:
    """
    Generate a PDF for every record and return its bytes.

    Args:
        output_path: If given, the PDF is also written there

    Raises:
        GenerationError: If the PDF cannot be written
        (plus everything generate() raises)
    """
    config = config or GeneratorConfig()
    if not isinstance(template, Template):
        template = deserialize_template(template, strict=config.strict)

    result = generate(template, inputs, plugins=plugins, fonts=fonts, config=config)
    data = render_pdf(result, template, config=config)

    if output_path is not None:
        output_path = Path(output_path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(data)
        except OSError as e:
            raise GenerationError(f"Failed to write {output_path}: {e}") from e
        logger.info(f"Wrote {result.page_count} page(s) to {output_path}")
    return data
