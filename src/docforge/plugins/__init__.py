"""
Plugins Package

Field types. Each schema ``type`` maps to a Plugin that turns a value
into draw primitives; types whose height depends on content also
provide a dynamic-height hook used by the layout engine.
"""

from __future__ import annotations

from .registry import (
    Plugin,
    PluginRegistry,
    RenderContext,
    UnknownSchemaType,
)
from .builtins import builtin_plugins, default_registry

__all__ = [
    "Plugin",
    "PluginRegistry",
    "RenderContext",
    "UnknownSchemaType",
    "builtin_plugins",
    "default_registry",
]
