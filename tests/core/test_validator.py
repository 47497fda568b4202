"""
Unit Tests for Template and Input Validation

Tests for the validator module.
"""

import pytest

from docforge.core.models import Template
from docforge.core.schemas import (
    ValidationError,
    check_inputs,
    check_template,
    raise_for_violations,
    validate_template_data,
)
from docforge.core.schemas.validator import (
    DUPLICATE_NAME,
    INVALID_BODY_RANGE,
    INVALID_COLOR,
    INVALID_GEOMETRY,
    INVALID_VALUE,
    MISSING_REQUIRED,
    NO_INPUTS,
    PAGE_COUNT,
    UNKNOWN_FONT,
    UNKNOWN_TYPE,
    Violation,
)


@pytest.fixture
def template_of(blank_base):
    def _create(*pages) -> Template:
        return Template.from_dict({"basePdf": blank_base, "schemas": [list(page) for page in pages]})
    return _create


def _kinds(violations):
    return [v.kind for v in violations]


class TestCheckTemplate:
    """Tests for check_template."""

    def test_when_template_valid_then_no_violations(self, template_of, make_schema, registry, fonts):
        template = template_of([make_schema("a"), make_schema("b", "table", head=["x"])])
        assert check_template(template, registry, fonts=fonts) == []

    def test_when_type_unknown_then_fatal(self, template_of, make_schema, registry):
        [violation] = check_template(template_of([make_schema("a", "hologram")]), registry)
        assert violation.kind == UNKNOWN_TYPE
        assert violation.fatal

    def test_when_duplicate_names_on_page_then_fatal(self, template_of, make_schema, registry):
        template = template_of([make_schema("a"), make_schema("a")])
        [violation] = check_template(template, registry)
        assert violation.kind == DUPLICATE_NAME
        assert violation.fatal
        assert violation.path == "schemas[0][1].name"

    def test_when_same_name_on_different_pages_then_allowed(self, template_of, make_schema, registry):
        assert check_template(template_of([make_schema("a")], [make_schema("a")]), registry) == []

    @pytest.mark.parametrize("field,value", [
        ("width", -1),
        ("height", float("nan")),
        ("opacity", 1.5),
        ("rotation", float("inf")),
    ])
    def test_when_geometry_invalid_then_reported(self, template_of, make_schema, registry, field, value):
        [violation] = check_template(template_of([make_schema("a", **{field: value})]), registry)
        assert violation.kind == INVALID_GEOMETRY
        assert not violation.fatal

    def test_when_body_range_reversed_then_reported(self, template_of, make_schema, registry):
        schema = make_schema("t", "table", head=["x"], bodyRange={"start": 3, "end": 1})
        assert _kinds(check_template(template_of([schema]), registry)) == [INVALID_BODY_RANGE]

    @pytest.mark.parametrize("body_range", [{"start": 1.5}, {"start": -1}, {"start": 0, "end": "3"}, {"start": True}])
    def test_when_body_range_bound_not_index_then_fatal(self, template_of, make_schema, registry, body_range):
        schema = make_schema("t", "table", head=["x"], bodyRange=body_range)
        [violation] = check_template(template_of([schema]), registry)
        assert violation.kind == INVALID_BODY_RANGE
        assert violation.fatal

    def test_when_body_range_bound_integral_float_then_accepted(self, template_of, make_schema, registry):
        template = template_of([make_schema("t", "table", head=["x"], bodyRange={"start": 1.0, "end": 4.0})])
        assert check_template(template, registry) == []
        assert template.schemas[0][0].body_range.to_dict() == {"start": 1, "end": 4}

    def test_when_nested_color_invalid_then_reported(self, template_of, make_schema, registry):
        schema = make_schema("t", "table", head=["x"], headStyles={"fontColor": "white"})
        [violation] = check_template(template_of([schema]), registry)
        assert violation.kind == INVALID_COLOR
        assert violation.path.endswith("headStyles.fontColor")

    def test_when_color_blank_or_transparent_then_allowed(self, template_of, make_schema, registry):
        schema = make_schema("a", backgroundColor="", fontColor="transparent")
        assert check_template(template_of([schema]), registry) == []

    def test_when_font_unknown_then_warning(self, template_of, make_schema, registry, fonts):
        [violation] = check_template(template_of([make_schema("a", fontName="Comic")]), registry, fonts=fonts)
        assert violation.kind == UNKNOWN_FONT
        assert not violation.fatal

    def test_when_template_longer_than_base_then_fatal(self, template_of, make_schema, registry):
        template = template_of([make_schema("a")], [make_schema("b")])
        [violation] = check_template(template, registry, base_page_count=1)
        assert violation.kind == PAGE_COUNT
        assert violation.fatal


class TestCheckInputs:
    """Tests for check_inputs."""

    def test_when_no_records_then_fatal(self, template_of, make_schema, registry):
        [violation] = check_inputs(template_of([make_schema("a")]), [], registry)
        assert violation.kind == NO_INPUTS
        assert violation.fatal

    @pytest.mark.parametrize("value", [None, "", [], {}])
    def test_when_required_value_empty_then_fatal(self, template_of, make_schema, registry, value):
        template = template_of([make_schema("a", required=True)])
        [violation] = check_inputs(template, [{"a": value}], registry)
        assert violation.kind == MISSING_REQUIRED
        assert violation.path == "inputs[0].a"

    def test_when_required_field_read_only_then_not_checked(self, template_of, make_schema, registry):
        template = template_of([make_schema("a", required=True, readOnly=True, content="fixed")])
        assert check_inputs(template, [{}], registry) == []

    def test_when_optional_field_missing_then_fine(self, template_of, make_schema, registry):
        assert check_inputs(template_of([make_schema("a")]), [{}], registry) == []

    def test_when_value_fails_plugin_check_then_warning(self, template_of, make_schema, registry):
        template = template_of([make_schema("code", "ean13")])
        [violation] = check_inputs(template, [{"code": "123"}], registry)
        assert violation.kind == INVALID_VALUE
        assert not violation.fatal

    def test_when_several_records_then_each_reported(self, template_of, make_schema, registry):
        template = template_of([make_schema("a", required=True)])
        violations = check_inputs(template, [{"a": "x"}, {}, {"a": ""}], registry)
        assert [v.path for v in violations] == ["inputs[1].a", "inputs[2].a"]

    def test_when_field_repeated_on_pages_then_reported_once_per_record(self, template_of, make_schema, registry):
        template = template_of([make_schema("a", required=True)], [make_schema("a", required=True)])
        violations = check_inputs(template, [{}, {}], registry)
        assert [v.path for v in violations] == ["inputs[0].a", "inputs[1].a"]

    def test_when_repeated_field_required_on_later_page_only_then_reported(self, template_of, make_schema, registry):
        template = template_of([make_schema("a")], [make_schema("a", required=True)])
        assert _kinds(check_inputs(template, [{}], registry)) == [MISSING_REQUIRED]

class TestRaiseForViolations:
    """Tests for raise_for_violations."""

    def test_when_only_warnings_then_returned(self):
        warnings = [Violation("x", "odd colour", kind=INVALID_COLOR)]
        assert raise_for_violations(warnings) == warnings

    def test_when_strict_then_warnings_raise(self):
        with pytest.raises(ValidationError):
            raise_for_violations([Violation("x", "odd colour", kind=INVALID_COLOR)], strict=True)

    def test_when_fatal_then_every_violation_attached(self):
        violations = [
            Violation("a", "warn", "s1", INVALID_COLOR),
            Violation("b", "boom", "s2", DUPLICATE_NAME, fatal=True),
        ]
        with pytest.raises(ValidationError) as exc_info:
            raise_for_violations(violations)
        assert exc_info.value.violations == violations
        assert exc_info.value.schema_names == ["s1", "s2"]
        assert exc_info.value.path == "b"


class TestValidateTemplateData:
    """Tests for raw template structure checks."""

    def test_when_missing_fields_then_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_template_data({"schemas": []})
        assert "basePdf" in str(exc_info.value)

    def test_when_not_an_object_then_raises(self):
        with pytest.raises(ValidationError):
            validate_template_data([1, 2])

    def test_when_strict_and_valid_then_passes(self, blank_base, make_schema):
        validate_template_data({"basePdf": blank_base, "schemas": [[make_schema("a")]]}, strict=True)

    def test_when_strict_and_padding_short_then_raises(self, make_schema):
        data = {"basePdf": {"width": 10, "height": 10, "padding": [1, 2]}, "schemas": [[make_schema("a")]]}
        with pytest.raises(ValidationError) as exc_info:
            validate_template_data(data, strict=True)
        assert exc_info.value.path.startswith("basePdf")

    def test_when_strict_and_schema_lacks_type_then_raises(self, blank_base):
        data = {"basePdf": blank_base, "schemas": [[{"name": "a", "position": {"x": 0, "y": 0}}]]}
        with pytest.raises(ValidationError):
            validate_template_data(data, strict=True)
