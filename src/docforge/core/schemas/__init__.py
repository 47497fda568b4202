"""
Schemas Package

Template/input validation and the bundled template JSON schema.
"""

from .validator import (
    Violation,
    ValidationError,
    check_template,
    check_inputs,
    raise_for_violations,
    validate_template_data,
)

__all__ = [
    "Violation",
    "ValidationError",
    "check_template",
    "check_inputs",
    "raise_for_violations",
    "validate_template_data",
]
