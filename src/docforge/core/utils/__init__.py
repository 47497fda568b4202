"""
Utils Package

Serialization and utility functions.
"""

from .serialization import (
    serialize_template,
    deserialize_template,
    load_template,
    save_template,
    load_inputs,
    get_input_from_template,
)

__all__ = [
    "serialize_template",
    "deserialize_template",
    "load_template",
    "save_template",
    "load_inputs",
    "get_input_from_template",
]
