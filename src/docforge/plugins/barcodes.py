"""
Module: plugins.barcodes

Purpose:
    Barcode and QR field types. Values are checked per symbology here;
    drawing is left to the output sink, which renders the Barcode
    primitive with ReportLab's barcode widgets.

Key Functions:
    - validate_barcode_input(): Is a value encodable by a symbology?
    - gtin_check_digit(): Mod-10 check digit for EAN/UPC/ITF-14

Key Objects:
    - BARCODE_PLUGINS: Type name -> Plugin for every symbology
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from docforge.common.colors import optional_color
from docforge.core.errors import InvalidFieldValue
from docforge.core.models import Barcode, Primitive, Schema
from docforge.plugins.registry import Plugin, RenderContext
from docforge.plugins.utils import as_text, primitive_common


def gtin_check_digit(digits: str) -> int:
    """
    Check digit for a GTIN payload (digits without the check digit).

    Example:
        >>> gtin_check_digit("400638133393")
        1
    """
    total = sum(int(d) * (3 if i % 2 == 0 else 1) for i, d in enumerate(reversed(digits)))
    return (10 - total % 10) % 10


def _gtin(length: int) -> Callable[[str], bool]:
    """Accept the payload alone, or the payload plus a correct check digit."""
    pattern = re.compile(rf"^\d{{{length - 1}}}$|^\d{{{length}}}$")

    def check(value: str) -> bool:
        if not pattern.match(value):
            return False
        if len(value) == length:
            return gtin_check_digit(value[:-1]) == int(value[-1])
        return True

    return check


_CODE39 = re.compile(r"^[0-9A-Z\-. $/+%]+$")
_NW7 = re.compile(r"^[A-Da-d][0-9\-$:/.+]+[A-Da-d]$")


def _printable_ascii(value: str) -> bool:
    return all(32 <= ord(ch) < 127 for ch in value)


@dataclass(frozen=True)
class Symbology:
    """
    Attributes:
        reportlab_name: Barcode name understood by ReportLab
        check: Returns True when a value is encodable
        strip_check_digit: Drop a trailing check digit before drawing
            (ReportLab computes it itself)
        sample: Default content for a new field
    """

    reportlab_name: str
    check: Callable[[str], bool]
    sample: str
    strip_check_digit: Optional[int] = None


SYMBOLOGIES: Dict[str, Symbology] = {
    "qrcode": Symbology("QR", lambda v: len(v) > 0, "https://example.com"),
    "code128": Symbology("Code128", _printable_ascii, "docforge"),
    "ean13": Symbology("EAN13", _gtin(13), "2112345678900", strip_check_digit=13),
    "ean8": Symbology("EAN8", _gtin(8), "02345673", strip_check_digit=8),
    "code39": Symbology("Standard39", lambda v: bool(_CODE39.match(v)), "THIS IS CODE 39"),
    "upca": Symbology("UPCA", _gtin(12), "416000336108", strip_check_digit=12),
    "itf14": Symbology("I2of5", _gtin(14), "15400141288763"),
    "nw7": Symbology("Codabar", lambda v: bool(_NW7.match(v)), "A0123456789B"),
}


def validate_barcode_input(type_name: str, value: str) -> bool:
    """
    Whether value can be encoded as the given symbology.

    Example:
        >>> validate_barcode_input("ean13", "4006381333931")
        True
        >>> validate_barcode_input("ean13", "4006381333932")
        False
    """
    symbology = SYMBOLOGIES.get(type_name)
    if symbology is None:
        return False
    return symbology.check(value)


def _normalized_payload(type_name: str, value: str) -> str:
    symbology = SYMBOLOGIES[type_name]
    if type_name == "itf14" and len(value) == 13:
        return value + str(gtin_check_digit(value))
    if symbology.strip_check_digit and len(value) == symbology.strip_check_digit:
        return value[:-1]
    return value


def _barcode_plugin(type_name: str) -> Plugin:
    symbology = SYMBOLOGIES[type_name]

    def _pdf(ctx: RenderContext) -> List[Primitive]:
        value = as_text(ctx.value)
        if not value:
            return []
        schema = ctx.schema
        if not symbology.check(value):
            raise InvalidFieldValue(
                f"{value!r} cannot be encoded as {type_name} (field {schema.name!r})", schema.name
            )
        return [Barcode(
            symbology=symbology.reportlab_name,
            value=_normalized_payload(type_name, value),
            x=schema.position.x,
            y=schema.position.y,
            width=schema.width,
            height=schema.height,
            bar_color=schema.get("barColor") or "#000000",
            background_color=optional_color(schema.get("backgroundColor")),
            include_text=bool(schema.get("includetext", False)),
            **primitive_common(schema),
        )]

    def _check(value: Any, schema: Schema) -> Optional[str]:
        text = as_text(value)
        if text and not symbology.check(text):
            return f"{text!r} cannot be encoded as {type_name}"
        return None

    square = type_name == "qrcode"
    return Plugin(
        pdf=_pdf,
        default_schema={
            "type": type_name,
            "content": symbology.sample,
            "position": {"x": 0, "y": 0},
            "width": 30 if square else 40,
            "height": 30 if square else 16,
            "rotation": 0,
            "opacity": 1,
            "backgroundColor": "#ffffff",
            "barColor": "#000000",
            "includetext": False,
        },
        check_value=_check,
    )


BARCODE_PLUGINS: Dict[str, Plugin] = {name: _barcode_plugin(name) for name in SYMBOLOGIES}
