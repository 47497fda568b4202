"""Hex colour validation and conversion."""

from __future__ import annotations

import re
from typing import Optional, Tuple

HEX_COLOR_PATTERN = re.compile(r"^#(?:[A-Fa-f0-9]{3}|[A-Fa-f0-9]{6})$")


def is_hex_valid(value: str) -> bool:
    """Check for a 3- or 6-digit hex colour such as ``#fff`` or ``#2980ba``."""
    return isinstance(value, str) and HEX_COLOR_PATTERN.match(value) is not None


def hex_to_rgb(value: str) -> Tuple[float, float, float]:
    """
    Convert a hex colour to an RGB triple in the 0..1 range.

    Raises:
        ValueError: If value is not a valid hex colour
    """
    if not is_hex_valid(value):
        raise ValueError(f"Invalid hex colour: {value!r}")
    digits = value[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return tuple(int(digits[i:i + 2], 16) / 255.0 for i in (0, 2, 4))  # type: ignore[return-value]


def optional_color(value: Optional[str]) -> Optional[str]:
    """Normalise an optional colour field: blank and 'transparent' mean no colour."""
    if not value or value == "transparent":
        return None
    return value
