"""
Tests for the generation controller.
"""

import base64
import copy
import json
from datetime import datetime

import fitz
import pytest

from docforge.common.units import mm2pt
from docforge.core.errors import InvalidFieldValue
from docforge.core.models import Template, TextRun
from docforge.core.schemas import ValidationError
from docforge.generator import GeneratorConfig, generate
from docforge.plugins import Plugin, UnknownSchemaType, builtin_plugins


@pytest.fixture
def two_page_template(blank_base, make_schema) -> dict:
    return {
        "basePdf": blank_base,
        "schemas": [
            [make_schema("a", y=10), make_schema("b", y=30)],
            [make_schema("c", y=10)],
        ],
    }


def _texts(page):
    return [p.text for p in page.primitives if isinstance(p, TextRun)]


def _custom_base(*sizes) -> str:
    doc = fitz.open()
    for width, height in sizes:
        doc.new_page(width=width, height=height)
    data = doc.tobytes()
    doc.close()
    return "data:application/pdf;base64," + base64.b64encode(data).decode("ascii")


class TestOrdering:
    """Tests for page and primitive ordering."""

    def test_when_records_then_pages_in_record_then_page_order(self, two_page_template):
        inputs = [{"a": "a0", "b": "b0", "c": "c0"}, {"a": "a1", "b": "b1", "c": "c1"}]
        result = generate(two_page_template, inputs)
        assert result.record_count == 2
        assert [(p.record_index, p.page_index, p.schema_names) for p in result.pages] == [
            (0, 0, ("a", "b")),
            (0, 1, ("c",)),
            (1, 0, ("a", "b")),
            (1, 1, ("c",)),
        ]
        assert [_texts(p) for p in result.pages_for(1)] == [["a1", "b1"], ["c1"]]

    def test_when_declared_below_first_then_still_drawn_first(self, blank_base, make_schema):
        template = {"basePdf": blank_base, "schemas": [[make_schema("low", y=60), make_schema("high", y=10)]]}
        result = generate(template, [{"low": "L", "high": "H"}])
        assert result.pages[0].schema_names == ("low", "high")

    def test_when_generated_then_units_are_points(self, two_page_template, blank_base):
        result = generate(two_page_template, [{"a": "x", "b": "y", "c": "z"}])
        page = result.pages[0]
        assert page.width == pytest.approx(mm2pt(blank_base["width"]))
        run = next(p for p in page.primitives if isinstance(p, TextRun))
        assert run.x == pytest.approx(mm2pt(10))

    def test_when_table_splits_then_rows_drawn_once_in_order(self, blank_base, make_schema):
        template = {"basePdf": blank_base, "schemas": [[
            make_schema("items", "table", y=20, width=80, height=30, head=["Item"]),
        ]]}
        rows = [[f"row-{i}"] for i in range(25)]
        result = generate(template, [{"items": json.dumps(rows)}])
        assert result.page_count > 1
        drawn = [t for page in result.pages for t in _texts(page) if t.startswith("row-")]
        assert drawn == [f"row-{i}" for i in range(25)]
        assert all(_texts(page)[0] == "Item" for page in result.pages)


class TestInputs:
    """Tests for input handling."""

    def test_when_generated_then_inputs_not_mutated(self, blank_base, make_schema):
        template = {"basePdf": blank_base, "schemas": [[
            make_schema("items", "table", y=20, width=80, height=30, head=["Item"]),
        ]]}
        inputs = [{"items": [["a"], ["b"]]}]
        snapshot = copy.deepcopy(inputs)
        generate(template, inputs)
        assert inputs == snapshot

    def test_when_no_records_then_validation_error(self, two_page_template):
        with pytest.raises(ValidationError) as exc_info:
            generate(two_page_template, [])
        assert "input record" in str(exc_info.value)

    def test_when_required_missing_then_names_reported(self, blank_base, make_schema):
        template = {"basePdf": blank_base, "schemas": [[make_schema("a", required=True), make_schema("b")]]}
        with pytest.raises(ValidationError) as exc_info:
            generate(template, [{"b": "x"}])
        assert exc_info.value.schema_names == ["a"]

    def test_when_missing_optional_then_drawn_empty(self, two_page_template):
        result = generate(two_page_template, [{"a": "only"}])
        assert [_texts(p) for p in result.pages] == [["only"], []]

    def test_when_read_only_content_then_placeholders_filled(self, blank_base, make_schema):
        template = {"basePdf": blank_base, "schemas": [[
            make_schema("header", readOnly=True, width=90,
                        content="{name} {date} p{currentPage}/{totalPages} {unknown}"),
            make_schema("name", y=40),
        ]]}
        config = GeneratorConfig(now=datetime(2024, 1, 2))
        result = generate(template, [{"name": "Ada"}], config=config)
        assert _texts(result.pages[0])[0] == "Ada 2024/01/02 p1/1 {unknown}"


class TestValidation:
    """Tests for validation ordering and strictness."""

    def test_when_type_unknown_then_raised_before_other_violations(self, blank_base, make_schema):
        template = {"basePdf": blank_base, "schemas": [[make_schema("a", "hologram"), make_schema("a")]]}
        with pytest.raises(UnknownSchemaType):
            generate(template, [])

    def test_when_warning_then_collected(self, blank_base, make_schema):
        template = {"basePdf": blank_base, "schemas": [[make_schema("a", fontName="Comic")]]}
        result = generate(template, [{"a": "x"}])
        assert len(result.warnings) == 1
        assert "Comic" in result.warnings[0]

    def test_when_strict_then_warning_fatal(self, blank_base, make_schema):
        template = {"basePdf": blank_base, "schemas": [[make_schema("a", fontName="Comic")]]}
        with pytest.raises(ValidationError):
            generate(template, [{"a": "x"}], config=GeneratorConfig(strict=True))

    def test_when_value_unrenderable_then_raises(self, blank_base, make_schema):
        template = {"basePdf": blank_base, "schemas": [[make_schema("code", "ean13")]]}
        with pytest.raises(InvalidFieldValue):
            generate(template, [{"code": "12"}])

    def test_when_body_range_not_integer_then_validation_error(self, blank_base, make_schema):
        template = {"basePdf": blank_base, "schemas": [[
            make_schema("items", "table", y=20, width=80, height=30, head=["Item"], bodyRange={"start": 1.5}),
        ]]}
        with pytest.raises(ValidationError) as exc_info:
            generate(template, [{"items": '[["r0"], ["r1"]]'}])
        assert "bodyRange" in str(exc_info.value)

    def test_when_body_range_integral_float_then_rows_sliced(self, blank_base, make_schema):
        template = {"basePdf": blank_base, "schemas": [[
            make_schema("items", "table", y=20, width=80, height=30, head=["Item"], bodyRange={"start": 1.0}),
        ]]}
        result = generate(template, [{"items": '[["r0"], ["r1"]]'}])
        texts = _texts(result.pages[0])
        assert "r1" in texts
        assert "r0" not in texts


class TestPlugins:
    """Tests for caller-supplied plugins."""

    def test_when_mapping_given_then_replaces_builtins(self, two_page_template):
        with pytest.raises(UnknownSchemaType):
            generate(two_page_template, [{"a": "x"}], plugins={"table": builtin_plugins()["table"]})

    def test_when_custom_plugin_then_receives_context(self, blank_base, make_schema):
        seen = []

        def render(ctx):
            seen.append((ctx.schema.name, ctx.value, ctx.page_index, ctx.total_pages))
            return []

        plugins = {**builtin_plugins(), "stamp": Plugin(pdf=render)}
        template = {"basePdf": blank_base, "schemas": [[make_schema("s", "stamp")]]}
        generate(template, [{"s": "v1"}, {"s": "v2"}], plugins=plugins)
        assert seen == [("s", "v1", 0, 1), ("s", "v2", 0, 1)]


class TestCustomBase:
    """Tests for templates on an existing PDF."""

    def test_when_custom_base_then_page_sizes_from_pdf(self, make_schema):
        template = Template.from_dict({
            "basePdf": _custom_base((300, 400), (500, 200)),
            "schemas": [[make_schema("a")], [make_schema("b")]],
        })
        result = generate(template, [{"a": "x", "b": "y"}])
        assert [(p.width, p.height) for p in result.pages] == [
            (pytest.approx(300), pytest.approx(400)),
            (pytest.approx(500), pytest.approx(200)),
        ]

    def test_when_template_longer_than_base_then_validation_error(self, make_schema):
        template = Template.from_dict({
            "basePdf": _custom_base((300, 400)),
            "schemas": [[make_schema("a")], [make_schema("b")]],
        })
        with pytest.raises(ValidationError):
            generate(template, [{"a": "x"}])

    def test_when_base_not_a_pdf_then_validation_error(self, make_schema):
        template = Template.from_dict({
            "basePdf": base64.b64encode(b"definitely not a pdf").decode(),
            "schemas": [[make_schema("a")]],
        })
        with pytest.raises(ValidationError):
            generate(template, [{"a": "x"}])
