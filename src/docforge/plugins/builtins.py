"""
Module: plugins.builtins

Purpose:
    The built-in field types, keyed by the schema ``type`` names used in
    template JSON.

Key Functions:
    - builtin_plugins(): Fresh type name -> Plugin mapping
    - default_registry(): Registry over the built-in plugins
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from .barcodes import BARCODE_PLUGINS
from .fields import checkbox, date, date_time, radio_group, select, time
from .graphics import image, signature, svg
from .registry import Plugin, PluginRegistry
from .shapes import ellipse, line, rectangle
from .table import table
from .text import multi_variable_text, text


def builtin_plugins() -> Dict[str, Plugin]:
    """
    Return a new mapping of every built-in type; callers may extend it.

    Example:
        >>> plugins = builtin_plugins()
        >>> plugins["table"] is builtin_plugins()["table"]
        True
        >>> plugins is builtin_plugins()
        False
    """
    plugins: Dict[str, Plugin] = {
        "text": text,
        "multiVariableText": multi_variable_text,
        "image": image,
        "signature": signature,
        "svg": svg,
        "table": table,
        "line": line,
        "rectangle": rectangle,
        "ellipse": ellipse,
        "date": date,
        "time": time,
        "dateTime": date_time,
        "select": select,
        "radioGroup": radio_group,
        "checkbox": checkbox,
    }
    plugins.update(BARCODE_PLUGINS)
    return plugins


def default_registry(extra: Optional[Mapping[str, Plugin]] = None) -> PluginRegistry:
    """Registry over the built-ins, with ``extra`` plugins added or overriding."""
    plugins = builtin_plugins()
    plugins.update(extra or {})
    return PluginRegistry(plugins)
