#!/usr/bin/env python3
"""
Purpose:
    Validates document values against an internal schema and reports one
    human-readable message per failing top-level field, for display next to
    form inputs.

Notes:
    - Checks run in a fixed order per type and stop at the first failure.
    - Nested failures are flattened into one string, prefixed with the
      property name, record key, or 1-based item number.
    - For optional fields, `None` and "" both count as "no value".
    - A missing required field is reported as a type mismatch
      (e.g. "Must be a string"); there is no dedicated "required" message.
    - Date bounds are not checked here (the compiled model does check them).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional

from docschema.core.formatting import prefix_message
from docschema.core.schema.field_type import FieldType
from docschema.core.schema.fields import (
    FieldBase,
    StringField,
    NumberField,
    ArrayField,
    ObjectField,
    EnumField,
    RecordField,
)
from docschema.core.utils import format_number, is_number

_MISSING = object()


# --- Public API --- #

def validate_values(values: Mapping[str, Any], schema: Mapping[str, FieldBase]) -> Dict[str, str]:
    """
    Return `{field name: message}` for every invalid field; `{}` means valid.
    """
    errors: Dict[str, str] = {}
    for key, field in schema.items():
        value = values.get(key, _MISSING)
        if field.is_optional and is_empty(value):
            continue
        error = validate_field(value, field)
        if error:
            errors[key] = error
    return errors


def validate_field(value: Any, field: FieldBase) -> Optional[str]:
    """Return the first failing check's message for `value`, or `None`."""
    return _VALIDATORS[field.field_type](value, field)


def is_empty(value: Any) -> bool:
    """True for a missing value, `None`, or the empty string."""
    return value is _MISSING or value is None or (isinstance(value, str) and value == "")


# --- Per-type validators --- #

def _string(value: Any, field: StringField) -> Optional[str]:
    if not isinstance(value, str):
        return "Must be a string"
    if field.min_length is not None and len(value) < field.min_length:
        return f"Must be at least {field.min_length} characters"
    if field.max_length is not None and len(value) > field.max_length:
        return f"Must be at most {field.max_length} characters"
    if field.format == "email" and "@" not in value:
        return "Must be a valid email address"
    return None


def _number(value: Any, field: NumberField) -> Optional[str]:
    if not is_number(value):
        return "Must be a number"
    if field.is_integer and not (isinstance(value, int) or value.is_integer()):
        return "Must be an integer"
    if field.is_positive and value <= 0:
        return "Must be positive"
    if field.min is not None and value < field.min:
        return f"Must be at least {format_number(field.min)}"
    if field.max is not None and value > field.max:
        return f"Must be at most {format_number(field.max)}"
    return None


def _boolean(value: Any, field: FieldBase) -> Optional[str]:
    if not isinstance(value, bool):
        return "Must be a boolean"
    return None


def _date(value: Any, field: FieldBase) -> Optional[str]:
    if not isinstance(value, datetime):
        return "Must be a valid date"
    return None


def _array(value: Any, field: ArrayField) -> Optional[str]:
    if not isinstance(value, list):
        return "Must be an array"
    if field.min_items is not None and len(value) < field.min_items:
        return f"Must have at least {field.min_items} items"
    if field.max_items is not None and len(value) > field.max_items:
        return f"Must have at most {field.max_items} items"
    for i, item in enumerate(value):
        error = validate_field(item, field.item_type)
        if error:
            return prefix_message(f"Item {i + 1}", error)
    return None


def _object(value: Any, field: ObjectField) -> Optional[str]:
    if not isinstance(value, dict):
        return "Must be an object"
    for prop in field.properties:
        prop_value = value.get(prop.name, _MISSING)
        if prop.is_optional and is_empty(prop_value):
            continue
        error = validate_field(prop_value, prop)
        if error:
            return prefix_message(prop.name, error)
    return None


def _enum(value: Any, field: EnumField) -> Optional[str]:
    if not isinstance(value, str) or value not in field.options:
        return f"Must be one of: {', '.join(field.options)}"
    return None


def _record(value: Any, field: RecordField) -> Optional[str]:
    if not isinstance(value, dict):
        return "Must be an object"
    for key, item in value.items():
        error = validate_field(item, field.value_type)
        if error:
            return prefix_message(key, error)
    return None


_VALIDATORS: Dict[FieldType, Callable[[Any, Any], Optional[str]]] = {
    FieldType.STRING: _string,
    FieldType.NUMBER: _number,
    FieldType.BOOLEAN: _boolean,
    FieldType.DATE: _date,
    FieldType.ARRAY: _array,
    FieldType.OBJECT: _object,
    FieldType.ENUM: _enum,
    FieldType.RECORD: _record,
}

if set(_VALIDATORS) != FieldType.concrete():
    raise RuntimeError("Value validation must handle every concrete FieldType")
