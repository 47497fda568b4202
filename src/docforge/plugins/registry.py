"""
Module: plugins.registry

Purpose:
    The rendering contract every field type implements, and the
    registry that maps a schema ``type`` string to its plugin for the
    duration of one generation call.

Key Classes:
    - RenderContext: Everything a renderer may read
    - Plugin: Capability bundle for one field type
    - PluginRegistry: Read-only type name -> Plugin mapping
    - UnknownSchemaType: Raised for types with no plugin

Dependencies:
    - core.models: Schema, PageGeometry, primitives
    - core.cache: ComputationCache
    - common.fonts: FontSet

Used By:
    - plugins.builtins: Built-in plugin set
    - core.schemas.validator: Required-field defaults
    - generator.layout.paginator: Dynamic-height hooks
    - generator.controller: Rendering
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterator, List, Mapping, Optional, Sequence

from docforge.common.fonts import FontSet
from docforge.core.cache import ComputationCache
from docforge.core.errors import DocforgeError
from docforge.core.models import PageGeometry, Position, Primitive, Schema, Template


class UnknownSchemaType(DocforgeError):
    """Raised when a schema names a type with no registered plugin."""

    def __init__(self, type_names: Sequence[str], schema_names: Sequence[str] = ()):
        names = ", ".join(repr(t) for t in type_names)
        super().__init__(f"Unknown schema type(s): {names}")
        self.type_names = tuple(type_names)
        self.schema_names = tuple(schema_names)


@dataclass(frozen=True)
class RenderContext:
    """
    Input to a plugin's output renderer.

    Attributes:
        schema: Schema being drawn (geometry already resolved by layout)
        value: Resolved value for this record
        page: Geometry of the output page
        fonts: Read-only font set
        cache: Call-scoped computation cache
        page_index: Output page index within the current document
        total_pages: Output pages in the current document
    """

    schema: Schema
    value: Any
    page: PageGeometry
    fonts: FontSet
    cache: ComputationCache
    page_index: int = 0
    total_pages: int = 1


# (ctx) -> primitives in mm
PdfRender = Callable[[RenderContext], List[Primitive]]
# (value, schema, *, page, fonts, cache) -> heights in mm
DynamicHeights = Callable[..., List[float]]
# (value, schema) -> problem description or None
ValueCheck = Callable[[Any, Schema], Optional[str]]


@dataclass(frozen=True)
class Plugin:
    """
    Renderer bundle for one field type.

    Attributes:
        pdf: Output renderer producing draw primitives
        default_schema: Defaults for a newly placed field of this type
        ui: Optional hook for hosting UIs (not used by the generator)
        get_dynamic_heights: Optional hook for content-dependent height
        check_value: Optional check used by input validation

    Example:
        >>> plugin = Plugin(pdf=lambda ctx: [], default_schema={"type": "x", "width": 10, "height": 5})
        >>> plugin.create_schema("field1").width
        10
    """

    pdf: PdfRender
    default_schema: Mapping[str, Any] = field(default_factory=dict)
    ui: Optional[Callable[..., Any]] = None
    get_dynamic_heights: Optional[DynamicHeights] = None
    check_value: Optional[ValueCheck] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_schema", MappingProxyType(dict(self.default_schema)))

    @property
    def has_dynamic_height(self) -> bool:
        return self.get_dynamic_heights is not None

    def is_required(self, schema: Schema) -> bool:
        """Schema's own ``required`` flag, else the plugin default."""
        if schema.required is not None:
            return bool(schema.required)
        return bool(self.default_schema.get("required", False))

    def create_schema(self, name: str, position: Optional[Position] = None, **overrides: Any) -> Schema:
        """Instantiate a new field of this type from the default schema."""
        data = dict(self.default_schema)
        data.update(overrides)
        data["name"] = name
        if position is not None:
            data["position"] = position.to_dict()
        return Schema.from_dict(data)


class PluginRegistry:
    """
    Read-only mapping of schema type name to Plugin.

    Lookup is an exact string match. A registry is built per generation
    call and never mutated afterwards.

    Example:
        >>> registry = PluginRegistry({"text": text_plugin})
        >>> registry.find("text") is text_plugin
        True
    """

    def __init__(self, plugins: Mapping[str, Plugin]):
        self._plugins: Mapping[str, Plugin] = MappingProxyType(dict(plugins))

    def find(self, type_name: str) -> Plugin:
        """
        Look up the plugin for a schema type.

        Raises:
            UnknownSchemaType: If no plugin is registered under type_name
        """
        plugin = self._plugins.get(type_name)
        if plugin is None:
            raise UnknownSchemaType([type_name])
        return plugin

    def ensure_known(self, template: Template) -> None:
        """
        Fail fast if any schema in the template has an unknown type.

        Raises:
            UnknownSchemaType: Listing every unknown type and the schemas using them
        """
        unknown_types: list[str] = []
        schema_names: list[str] = []
        for _, schema in template.iter_schemas():
            if schema.type not in self._plugins:
                if schema.type not in unknown_types:
                    unknown_types.append(schema.type)
                schema_names.append(schema.name)
        if unknown_types:
            raise UnknownSchemaType(unknown_types, schema_names)

    def types(self) -> tuple[str, ...]:
        return tuple(self._plugins)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._plugins

    def __iter__(self) -> Iterator[str]:
        return iter(self._plugins)

    def __len__(self) -> int:
        return len(self._plugins)
