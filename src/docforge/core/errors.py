"""
Module: core.errors

Purpose:
    Exception types that cross module boundaries. Errors specific to a
    single component (validation, image probing, the computation cache)
    live next to that component and subclass DocforgeError.
"""

from __future__ import annotations


class DocforgeError(Exception):
    """Base class for every error raised by docforge."""


class InvalidFieldValue(DocforgeError, ValueError):
    """Raised when a field value cannot be interpreted by its renderer."""

    def __init__(self, message: str, schema_name: str = ""):
        super().__init__(message)
        self.schema_name = schema_name


class GenerationError(DocforgeError):
    """Error while writing generated pages to an output sink."""
    pass
