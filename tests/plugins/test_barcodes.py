"""
Unit tests for barcode field types.
"""

import pytest

from docforge.core.errors import InvalidFieldValue
from docforge.core.models import Barcode, PageGeometry, Schema
from docforge.plugins.barcodes import (
    BARCODE_PLUGINS,
    SYMBOLOGIES,
    gtin_check_digit,
    validate_barcode_input,
)
from docforge.plugins.registry import RenderContext


class TestGtinCheckDigit:
    """Tests for GTIN check digits."""

    @pytest.mark.parametrize("payload,digit", [
        ("400638133393", 1),
        ("0234567", 3),
        ("41600033610", 8),
        ("1540014128876", 3),
    ])
    def test_when_payload_then_check_digit(self, payload, digit):
        assert gtin_check_digit(payload) == digit


class TestValidateBarcodeInput:
    """Tests for per-symbology input checks."""

    @pytest.mark.parametrize("type_name,value", [
        ("ean13", "4006381333931"),
        ("ean13", "400638133393"),
        ("ean8", "02345673"),
        ("upca", "416000336108"),
        ("itf14", "15400141288763"),
        ("code39", "HELLO-39"),
        ("nw7", "A123456B"),
        ("code128", "Any printable text!"),
        ("qrcode", "https://example.com/?q=1"),
    ])
    def test_when_valid_then_accepted(self, type_name, value):
        assert validate_barcode_input(type_name, value)

    @pytest.mark.parametrize("type_name,value", [
        ("ean13", "4006381333932"),
        ("ean13", "40063813"),
        ("ean8", "0234567X"),
        ("code39", "lowercase"),
        ("nw7", "123456"),
        ("code128", "tab\tseparated"),
        ("qrcode", ""),
    ])
    def test_when_invalid_then_rejected(self, type_name, value):
        assert not validate_barcode_input(type_name, value)

    def test_when_unknown_symbology_then_rejected(self):
        assert not validate_barcode_input("aztec", "x")

    @pytest.mark.parametrize("type_name", sorted(SYMBOLOGIES))
    def test_when_default_sample_then_valid(self, type_name):
        assert validate_barcode_input(type_name, SYMBOLOGIES[type_name].sample)


class TestBarcodePlugin:
    """Tests for barcode rendering."""

    def _ctx(self, make_schema, fonts, cache, type_name, value, **extra):
        schema = Schema.from_dict(make_schema("code", type_name, width=40, height=16, **extra))
        return RenderContext(schema=schema, value=value, page=PageGeometry(210, 297), fonts=fonts, cache=cache)

    def test_when_ean13_with_check_digit_then_digit_stripped(self, make_schema, fonts, cache):
        ctx = self._ctx(make_schema, fonts, cache, "ean13", "4006381333931")
        [barcode] = BARCODE_PLUGINS["ean13"].pdf(ctx)
        assert isinstance(barcode, Barcode)
        assert barcode.symbology == "EAN13"
        assert barcode.value == "400638133393"

    def test_when_itf14_without_check_digit_then_appended(self, make_schema, fonts, cache):
        ctx = self._ctx(make_schema, fonts, cache, "itf14", "1540014128876")
        [barcode] = BARCODE_PLUGINS["itf14"].pdf(ctx)
        assert barcode.value == "15400141288763"

    def test_when_colors_set_then_carried(self, make_schema, fonts, cache):
        ctx = self._ctx(
            make_schema, fonts, cache, "qrcode", "hello",
            barColor="#112233", backgroundColor="#ffffff",
        )
        [barcode] = BARCODE_PLUGINS["qrcode"].pdf(ctx)
        assert barcode.bar_color == "#112233"
        assert barcode.background_color == "#ffffff"

    def test_when_empty_value_then_nothing_drawn(self, make_schema, fonts, cache):
        ctx = self._ctx(make_schema, fonts, cache, "code128", "")
        assert BARCODE_PLUGINS["code128"].pdf(ctx) == []

    def test_when_value_not_encodable_then_raises(self, make_schema, fonts, cache):
        ctx = self._ctx(make_schema, fonts, cache, "ean8", "not digits")
        with pytest.raises(InvalidFieldValue) as exc_info:
            BARCODE_PLUGINS["ean8"].pdf(ctx)
        assert exc_info.value.schema_name == "code"

    def test_when_value_not_encodable_then_check_reports(self, make_schema):
        schema = Schema.from_dict(make_schema("code", "ean8"))
        assert BARCODE_PLUGINS["ean8"].check_value("not digits", schema)
        assert BARCODE_PLUGINS["ean8"].check_value("02345673", schema) is None
