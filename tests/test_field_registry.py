from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from core.field_registry import (
    DEFAULT_HANDLER,
    FieldType,
    format_value,
    get_handler,
    parse_input,
    parse_tags,
    render_field,
)
from core.schema_models import FieldDef


def make_field(**kwargs):
    data = {"id": "f1", "label": "Field", "type": "text"}
    data.update(kwargs)
    return FieldDef(**data)


ALL_TYPES = [field_type.value for field_type in FieldType] + ["rating", "unknown"]


@pytest.mark.parametrize("field_type", ALL_TYPES)
def test_missing_value_formats_to_empty_string(field_type):
    field = make_field(type=field_type, options=[{"value": "a", "label": "Alpha"}])
    assert format_value(field, None) == ""


def test_tags_round_trip():
    field = make_field(type="tags")
    tags = ["VIP", "Decision Maker"]

    formatted = format_value(field, tags)
    assert formatted == "VIP, Decision Maker"
    assert parse_input(field, formatted) == tags


def test_tags_parse_trims_and_drops_empty_pieces():
    assert parse_tags(" VIP , ,Decision Maker,  ") == ["VIP", "Decision Maker"]
    assert parse_tags("") == []


def test_tags_non_list_formats_to_empty_string():
    assert format_value(make_field(type="tags"), "VIP") == ""


def test_select_uses_label_and_falls_back_to_raw_value():
    field = make_field(type="select", options=[{"value": "a", "label": "Alpha"}])
    assert format_value(field, "a") == "Alpha"
    assert format_value(field, "b") == "b"


def test_select_format_does_not_touch_stored_value():
    field = make_field(type="select", options=[{"value": "a", "label": "Alpha"}])
    values = {"f1": "a"}
    format_value(field, values["f1"])
    assert values == {"f1": "a"}
    assert parse_input(field, "a") == "a"


def test_date_formats_short_date_and_parse_keeps_iso_string():
    field = make_field(type="date")
    assert format_value(field, "2024-03-01") == "3/1/2024"
    assert format_value(field, "") == ""
    assert parse_input(field, "2024-03-01") == "2024-03-01"


def test_text_like_types_use_string_conversion():
    for field_type in ("text", "email", "phone", "textarea"):
        field = make_field(type=field_type)
        assert format_value(field, 42) == "42"
        assert parse_input(field, " raw ") == " raw "


def test_unknown_type_is_display_only():
    field = make_field(type="rating")
    assert get_handler("rating") is DEFAULT_HANDLER

    rendering = render_field(field, 4, on_change=lambda value: None)
    assert rendering.display == "4"
    assert rendering.change is None
    assert rendering.element.find("field-display").text == "4"


def test_render_field_forwards_parsed_value_without_validation():
    received = []
    field = make_field(type="tags", required=True)
    rendering = render_field(field, ["a"], on_change=received.append)

    rendering.change("x, , y")
    rendering.change("")

    assert received == [["x", "y"], []]


def test_required_only_marks_label():
    field = make_field(required=True)
    rendering = render_field(field, None, on_change=lambda value: None)

    assert rendering.element.find("required-indicator").text == "*"
    assert rendering.editable


def test_textarea_rows_default_and_override():
    default = render_field(make_field(type="textarea"), "x").element.find("field-textarea")
    custom = render_field(make_field(type="textarea", rows=6), "x").element.find("field-textarea")
    assert default.attrs["rows"] == 3
    assert custom.attrs["rows"] == 6


def test_tags_field_shows_hint_and_joined_input_value():
    rendering = render_field(make_field(type="tags"), ["VIP", "Lead"])
    assert rendering.element.find("field-hint").text == "Separate tags with commas"
    assert rendering.element.find("field-tags").attrs["value"] == "VIP, Lead"


def test_select_control_lists_placeholder_and_options():
    field = make_field(type="select", options=[{"value": "a", "label": "Alpha"}, {"value": "b", "label": "Beta"}])
    control = render_field(field, "b").element.find("field-select")

    assert [option.text for option in control.children] == ["Select...", "Alpha", "Beta"]
    assert control.children[2].attrs.get("selected") is True
    assert "selected" not in control.children[1].attrs
