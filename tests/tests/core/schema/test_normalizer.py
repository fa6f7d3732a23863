#!/usr/bin/env python3
import logging
from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from docschema.core.schema.field_type import FieldType
from docschema.core.schema.fields import (
    StringField,
    NumberField,
    BooleanField,
    DateField,
    ArrayField,
    ObjectField,
    EnumField,
    RecordField,
)
from docschema.core.schema.normalizer import sdl_field_to_internal, sdl_to_internal_schema


# --- sdl_to_internal_schema --- #

def test_converts_schema_keyed_by_name():
    result = sdl_to_internal_schema({
        "fields": {
            "title": {"type": "string", "description": "The title of the document"},
            "age": {"type": "number", "integer": True, "min": 0},
        }
    })
    assert list(result) == ["title", "age"]
    assert result["title"].type == "string"
    assert result["title"].description == "The title of the document"
    assert isinstance(result["age"], NumberField)
    assert result["age"].is_integer is True
    assert result["age"].min == 0


def test_normalization_is_idempotent():
    sdl = {
        "fields": {
            "tags": {"type": "array", "items": {"type": "string", "minLength": 1}, "maxItems": 3},
            "meta": {"type": "object", "properties": {"a": {"type": "date", "min": "2024-01-01"}}},
            "extra": {"type": "record", "values": {"type": "enum", "options": ["x"]}},
        }
    }
    assert sdl_to_internal_schema(sdl) == sdl_to_internal_schema(sdl)


def test_empty_schema():
    assert sdl_to_internal_schema({"fields": {}}) == {}


# --- sdl_field_to_internal: per type --- #

def test_string_field():
    result = sdl_field_to_internal("email", {
        "type": "string",
        "minLength": 5,
        "maxLength": 100,
        "format": "email",
        "optional": True,
        "default": "a@b.com",
    })
    assert result == StringField(
        name="email",
        description="",
        min_length=5,
        max_length=100,
        format="email",
        is_optional=True,
        default_value="a@b.com",
    )
    assert result.has_default


def test_number_field_maps_flags():
    result = sdl_field_to_internal("count", {
        "type": "number",
        "description": "A number field",
        "min": 0,
        "max": 100,
        "integer": True,
        "positive": True,
        "optional": False,
    })
    assert isinstance(result, NumberField)
    assert (result.name, result.description) == ("count", "A number field")
    assert (result.min, result.max) == (0, 100)
    assert result.is_integer is True
    assert result.is_positive is True
    assert result.is_optional is False


def test_boolean_field_with_default():
    result = sdl_field_to_internal("isActive", {"type": "boolean", "description": "A boolean field", "default": True})
    assert isinstance(result, BooleanField)
    assert result.default_value is True
    assert result.is_optional is False


def test_date_bounds_become_datetimes():
    now = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)
    result = sdl_field_to_internal("publishDate", {
        "type": "date",
        "description": "A date field",
        "min": "2023-01-01",
        "max": now.isoformat(),
    })
    assert isinstance(result, DateField)
    assert isinstance(result.min, datetime) and isinstance(result.max, datetime)
    assert result.min == datetime(2023, 1, 1, tzinfo=timezone.utc)
    assert result.max == now


def test_date_bounds_accept_datetime_and_z_suffix():
    dt = datetime(2020, 1, 1, tzinfo=timezone.utc)
    result = sdl_field_to_internal("d", {"type": "date", "min": dt, "max": "2021-06-01T12:00:00Z"})
    assert result.min == dt
    assert result.max == datetime(2021, 6, 1, 12, tzinfo=timezone.utc)


def test_date_yaml_default_is_promoted_to_datetime():
    result = sdl_field_to_internal("d", {"type": "date", "default": date(2024, 1, 31)})
    assert result.default_value == datetime(2024, 1, 31, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw,expected", [
    ("2024-01-31", datetime(2024, 1, 31, tzinfo=timezone.utc)),
    ("2024-01-31T08:00:00Z", datetime(2024, 1, 31, 8, tzinfo=timezone.utc)),
    ("someday", "someday"),
    (None, None),
])
def test_date_string_default_is_promoted_when_parseable(raw, expected):
    result = sdl_field_to_internal("d", {"type": "date", "default": raw})
    assert result.default_value == expected


def test_invalid_date_bound_raises():
    with pytest.raises(ValueError, match="Invalid date string"):
        sdl_field_to_internal("d", {"type": "date", "min": "not a date"})


def test_array_field_synthesizes_item_name():
    result = sdl_field_to_internal("tags", {
        "type": "array",
        "description": "An array field",
        "minItems": 1,
        "maxItems": 5,
        "items": {"type": "string", "description": "A string item"},
    })
    assert isinstance(result, ArrayField)
    assert (result.min_items, result.max_items) == (1, 5)
    assert result.item_type.type == "string"
    assert result.item_type.name == "tagsItem"
    assert result.item_type.description == "A string item"


def test_object_properties_keep_declaration_order():
    result = sdl_field_to_internal("person", {
        "type": "object",
        "description": "An object field",
        "properties": {
            "name": {"type": "string", "description": "Name property"},
            "age": {"type": "number", "description": "Age property"},
        },
    })
    assert isinstance(result, ObjectField)
    assert [p.name for p in result.properties] == ["name", "age"]
    assert [p.type for p in result.properties] == ["string", "number"]


def test_enum_options_copied():
    result = sdl_field_to_internal("status", {"type": "enum", "options": ["draft", "published", "archived"]})
    assert isinstance(result, EnumField)
    assert result.options == ("draft", "published", "archived")


def test_enum_without_options_defaults_to_empty():
    assert sdl_field_to_internal("status", {"type": "enum"}).options == ()


def test_record_field_synthesizes_value_name():
    result = sdl_field_to_internal("metadata", {
        "type": "record",
        "description": "A record field",
        "values": {"type": "string", "description": "String values"},
    })
    assert isinstance(result, RecordField)
    assert result.value_type.type == "string"
    assert result.value_type.name == "metadataValue"


def test_nested_synthesized_names():
    result = sdl_field_to_internal("grid", {
        "type": "array",
        "items": {"type": "array", "items": {"type": "record", "values": {"type": "number"}}},
    })
    assert result.item_type.name == "gridItem"
    assert result.item_type.item_type.name == "gridItemItem"
    assert result.item_type.item_type.value_type.name == "gridItemItemValue"


# --- Absent vs present constraints --- #

def test_absent_constraints_stay_absent():
    result = sdl_field_to_internal("plain", {"type": "string"})
    assert result.min_length is None
    assert result.max_length is None
    assert result.format is None
    assert result.has_default is False
    assert result.model_dump(exclude_none=True) == {
        "name": "plain", "description": "", "is_optional": False, "type": "string",
    }


def test_explicit_null_default_is_still_a_default():
    result = sdl_field_to_internal("note", {"type": "string", "default": None})
    assert result.has_default is True
    assert result.default_value is None


def test_unsupported_string_format_is_dropped():
    assert sdl_field_to_internal("phone", {"type": "string", "format": "phone"}).format is None


# --- Unknown types --- #

@pytest.mark.parametrize("raw", [{"type": "geo", "description": "d", "optional": True}, {"description": "d", "optional": True}])
def test_unknown_type_falls_back_to_string(raw, caplog):
    with caplog.at_level(logging.DEBUG, logger="docschema.core.schema.normalizer"):
        result = sdl_field_to_internal("where", raw)
    assert isinstance(result, StringField)
    assert result.field_type is FieldType.STRING
    assert (result.name, result.description, result.is_optional) == ("where", "d", True)
    assert any("unknown type" in r.getMessage() for r in caplog.records)


def test_type_names_are_case_insensitive():
    assert isinstance(sdl_field_to_internal("n", {"type": " Number "}), NumberField)


# --- Immutability --- #

def test_fields_are_frozen():
    result = sdl_field_to_internal("t", {"type": "string"})
    with pytest.raises(ValidationError):
        result.name = "other"  # type: ignore[misc]
