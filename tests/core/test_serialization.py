"""
Unit Tests for Serialization Utilities

Tests for template and input record loading.
"""

import json

import pytest

from docforge.core.models import BlankPdf, BodyRange, CustomPdf, Schema, Template
from docforge.core.schemas import ValidationError
from docforge.core.utils import (
    deserialize_template,
    get_input_from_template,
    load_inputs,
    load_template,
    save_template,
    serialize_template,
)


@pytest.fixture
def template_data(blank_base, make_schema) -> dict:
    return {
        "basePdf": blank_base,
        "schemas": [[
            make_schema("title", content="Invoice", readOnly=True, fontSize=20),
            make_schema("items", "table", y=30, head=["a", "b"], bodyRange={"start": 2}),
            make_schema("customer", content="ACME"),
        ]],
    }


class TestTemplateModels:
    """Tests for Template parsing."""

    def test_when_parsed_then_fields_mapped(self, template_data):
        template = deserialize_template(template_data)
        title, items, customer = template.schemas[0]
        assert isinstance(template.base_pdf, BlankPdf)
        assert template.base_pdf.padding == (10, 10, 10, 10)
        assert title.read_only and title.get("fontSize") == 20
        assert items.body_range == BodyRange(start=2)
        assert customer.content == "ACME"

    def test_when_legacy_named_page_then_names_from_keys(self, blank_base):
        data = {"basePdf": blank_base, "schemas": [{
            "first": {"type": "text", "position": {"x": 0, "y": 0}, "width": 10, "height": 5},
        }]}
        [schema] = deserialize_template(data).schemas[0]
        assert schema.name == "first"

    def test_when_private_body_range_key_then_read(self, make_schema):
        schema = Schema.from_dict(make_schema("t", "table", __bodyRange={"start": 1, "end": 4}))
        assert schema.body_range == BodyRange(1, 4)

    def test_when_data_uri_base_then_custom_pdf(self, make_schema):
        template = deserialize_template({
            "basePdf": "data:application/pdf;base64,JVBERi0=",
            "schemas": [[make_schema("a")]],
        })
        assert isinstance(template.base_pdf, CustomPdf)
        assert template.base_pdf.data == b"%PDF-"

    def test_when_round_tripped_then_equal(self, template_data):
        template = deserialize_template(template_data)
        assert deserialize_template(serialize_template(template)) == template

    def test_when_source_dict_mutated_then_template_unchanged(self, template_data):
        template = deserialize_template(template_data)
        template_data["schemas"][0][1]["head"].append("c")
        assert template.schemas[0][1].get("head") == ["a", "b"]

    def test_when_padding_malformed_then_validation_error(self, make_schema):
        with pytest.raises(ValidationError):
            deserialize_template({
                "basePdf": {"width": 10, "height": 10, "padding": [1]},
                "schemas": [[make_schema("a")]],
            })


class TestTemplateFiles:
    """Tests for template file IO."""

    def test_when_saved_and_loaded_then_same_template(self, tmp_path, template_data):
        template = deserialize_template(template_data)
        path = tmp_path / "nested" / "template.json"
        save_template(template, path)
        assert load_template(path) == template

    def test_when_file_missing_then_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_template(tmp_path / "missing.json")

    def test_when_file_not_json_then_validation_error(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ValidationError):
            load_template(path)


class TestInputs:
    """Tests for input record loading."""

    def test_when_json_array_then_records(self, tmp_path):
        path = tmp_path / "inputs.json"
        path.write_text(json.dumps([{"a": "1"}, {"a": "2"}]))
        assert load_inputs(path) == [{"a": "1"}, {"a": "2"}]

    def test_when_single_object_then_one_record(self, tmp_path):
        path = tmp_path / "inputs.json"
        path.write_text(json.dumps({"a": "1"}))
        assert load_inputs(path) == [{"a": "1"}]

    def test_when_jsonl_then_one_record_per_line(self, tmp_path):
        path = tmp_path / "inputs.jsonl"
        path.write_text('{"a": "1"}\n\n{"a": "2"}\n')
        assert load_inputs(path) == [{"a": "1"}, {"a": "2"}]

    def test_when_records_not_objects_then_validation_error(self, tmp_path):
        path = tmp_path / "inputs.json"
        path.write_text(json.dumps([1, 2]))
        with pytest.raises(ValidationError):
            load_inputs(path)

    def test_when_sample_input_then_editable_fields_only(self, template_data):
        sample = get_input_from_template(Template.from_dict(template_data))
        assert sample == {"items": "", "customer": "ACME"}
