"""
Unit tests for text measurement and text-like field types.
"""

import json

import pytest

from docforge.common.units import pt2mm
from docforge.core.errors import InvalidFieldValue
from docforge.core.models import PageGeometry, Rectangle, Schema, TextRun
from docforge.plugins.registry import RenderContext
from docforge.plugins.text import multi_variable_text, substitute_variables, text
from docforge.plugins.text.measure import fit_font_size, split_text_to_lines

# Courier glyphs are 0.6em wide: ten 10pt characters fill 60pt.
TEN_COURIER_CHARS_MM = pt2mm(63)


def _wrap(value, fonts, width=TEN_COURIER_CHARS_MM):
    return split_text_to_lines(value, width, fonts=fonts, font_name="Courier", font_size=10)


class TestSplitTextToLines:
    """Tests for greedy word wrapping."""

    def test_when_fits_then_single_line(self, fonts):
        assert _wrap("short", fonts) == ["short"]

    def test_when_too_wide_then_wraps_between_words(self, fonts):
        assert _wrap("aaaa bbbb cccc", fonts) == ["aaaa bbbb", "cccc"]

    def test_when_word_wider_than_box_then_broken(self, fonts):
        assert _wrap("abcdefghijkl", fonts) == ["abcdefghij", "kl"]

    def test_when_newlines_then_always_break(self, fonts):
        assert _wrap("a\n\nb", fonts) == ["a", "", "b"]

    def test_when_empty_then_one_empty_line(self, fonts):
        assert _wrap("", fonts) == [""]


class TestFitFontSize:
    """Tests for dynamic font sizing."""

    def test_when_text_fits_at_max_then_max(self, fonts):
        size = fit_font_size("Hi", 50, 20, fonts=fonts, font_name=None, min_size=8, max_size=14)
        assert size == 14

    def test_when_box_small_then_shrinks_but_not_below_min(self, fonts):
        long_text = "lorem ipsum " * 30
        size = fit_font_size(long_text, 30, 10, fonts=fonts, font_name=None, min_size=6, max_size=20)
        assert size == 6


class TestTextPlugin:
    """Tests for the text renderer."""

    def _ctx(self, make_schema, value, fonts, cache, **extra):
        schema = Schema.from_dict(make_schema("title", "text", width=60, height=20, **extra))
        return RenderContext(schema=schema, value=value, page=PageGeometry(210, 297), fonts=fonts, cache=cache)

    def test_when_value_then_one_run_per_line(self, make_schema, fonts, cache):
        ctx = self._ctx(make_schema, "first\nsecond", fonts, cache)
        runs = text.pdf(ctx)
        assert [r.text for r in runs] == ["first", "second"]
        assert runs[1].y > runs[0].y
        assert all(r.font_name == "Helvetica" for r in runs)

    def test_when_background_then_drawn_first(self, make_schema, fonts, cache):
        ctx = self._ctx(make_schema, "x", fonts, cache, backgroundColor="#eeeeee")
        primitives = text.pdf(ctx)
        assert isinstance(primitives[0], Rectangle)
        assert isinstance(primitives[1], TextRun)

    def test_when_right_aligned_then_ends_at_box_edge(self, make_schema, fonts, cache):
        ctx = self._ctx(make_schema, "abc", fonts, cache, alignment="right", fontName="Courier", fontSize=10)
        run = text.pdf(ctx)[0]
        assert run.x + pt2mm(18) == pytest.approx(ctx.schema.position.x + ctx.schema.width)

    def test_when_empty_value_then_nothing_drawn(self, make_schema, fonts, cache):
        assert text.pdf(self._ctx(make_schema, "", fonts, cache)) == []

    def test_when_auto_height_then_grows_to_content(self, make_schema, fonts, cache):
        schema = Schema.from_dict(make_schema("body", "text", width=20, height=5, autoHeight=True))
        [height] = text.get_dynamic_heights("word " * 20, schema, page=None, fonts=fonts, cache=cache)
        assert height > 5

    def test_when_no_auto_height_then_static(self, make_schema, fonts, cache):
        schema = Schema.from_dict(make_schema("body", "text", width=20, height=5))
        assert text.get_dynamic_heights("word " * 20, schema, page=None, fonts=fonts, cache=cache) == [5]


class TestMultiVariableText:
    """Tests for templated text fields."""

    def test_when_variables_then_substituted(self):
        assert substitute_variables("Dear {name},", {"name": "Ada"}) == "Dear Ada,"

    def test_when_variable_missing_then_removed(self):
        assert substitute_variables("{a}-{b}", {"a": "1"}) == "1-"

    def test_when_rendered_then_uses_schema_text(self, make_schema, fonts, cache):
        schema = Schema.from_dict(make_schema("greeting", "multiVariableText", text="Hello {who}"))
        ctx = RenderContext(
            schema=schema, value=json.dumps({"who": "world"}), page=PageGeometry(210, 297),
            fonts=fonts, cache=cache,
        )
        assert [r.text for r in multi_variable_text.pdf(ctx)] == ["Hello world"]

    def test_when_value_not_object_then_check_fails(self, make_schema):
        schema = Schema.from_dict(make_schema("greeting", "multiVariableText", text="{x}"))
        assert multi_variable_text.check_value("[1, 2]", schema) is not None
        with pytest.raises(InvalidFieldValue):
            ctx = RenderContext(
                schema=schema, value="[1, 2]", page=PageGeometry(210, 297),
                fonts=None, cache=None,
            )
            multi_variable_text.pdf(ctx)
