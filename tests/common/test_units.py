"""
Unit tests for unit conversion and colour helpers.
"""

import pytest

from docforge.common.colors import hex_to_rgb, is_hex_valid, optional_color
from docforge.common.units import ZOOM, mm2pt, mm2px, pt2mm, pt2px, px2mm, px2pt


class TestUnitConversion:
    """Tests for mm/pt/px conversion."""

    def test_when_one_inch_in_mm_then_72_points(self):
        assert mm2pt(25.4) == pytest.approx(72.0)

    def test_when_a4_width_then_matches_pdf_points(self):
        assert mm2pt(210) == pytest.approx(595.2756, abs=1e-4)

    @pytest.mark.parametrize("value", [0, 1, 12.5, 297, -3.2, 1e-6, 1e6])
    def test_when_mm_round_trips_through_points_then_unchanged(self, value):
        assert pt2mm(mm2pt(value)) == pytest.approx(value, rel=1e-9, abs=0)

    def test_when_points_to_pixels_then_uses_96_dpi(self):
        assert pt2px(72) == pytest.approx(96)
        assert px2pt(96) == pytest.approx(72)

    def test_when_custom_scale_then_applied(self):
        assert pt2px(10, scale=2) == 20
        assert px2pt(20, scale=2) == 10

    def test_when_mm_to_pixels_then_matches_zoom(self):
        assert mm2px(10) == pytest.approx(10 * ZOOM)

    @pytest.mark.parametrize("scale", [0.5, 1, 2, 3.7, 96 / 72])
    @pytest.mark.parametrize("value", [0, 10, 297, -4.25])
    def test_when_mm_round_trips_through_pixels_then_unchanged(self, value, scale):
        assert px2mm(mm2px(value, scale), scale) == pytest.approx(value, rel=1e-9, abs=0)
        assert px2pt(pt2px(value, scale), scale) == pytest.approx(value, rel=1e-9, abs=0)

    def test_when_negative_then_not_clamped(self):
        assert mm2pt(-10) < 0


class TestColors:
    """Tests for hex colour helpers."""

    @pytest.mark.parametrize("value", ["#000", "#ffffff", "#2980BA"])
    def test_when_valid_hex_then_accepted(self, value):
        assert is_hex_valid(value)

    @pytest.mark.parametrize("value", ["000000", "#12345", "#gggggg", "red", ""])
    def test_when_invalid_hex_then_rejected(self, value):
        assert not is_hex_valid(value)

    def test_when_short_hex_then_expanded(self):
        assert hex_to_rgb("#f00") == (1.0, 0.0, 0.0)

    def test_when_blank_or_transparent_then_no_color(self):
        assert optional_color("") is None
        assert optional_color(None) is None
        assert optional_color("transparent") is None
        assert optional_color("#ffffff") == "#ffffff"
