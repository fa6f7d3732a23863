#!/usr/bin/env python3
"""
Purpose:
    Converts raw, user-authored SDL (plain dicts from a template) into the
    internal `SchemaField` model.

    Only constraints present on the input are carried over: an absent
    `minLength` stays absent rather than becoming a permissive sentinel.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, Mapping

from docschema.core import constants as C
from docschema.core.schema.field_type import FieldType
from docschema.core.schema.fields import (
    FieldBase,
    StringField,
    NumberField,
    BooleanField,
    DateField,
    ArrayField,
    ObjectField,
    EnumField,
    RecordField,
)
from docschema.core.schema.sdl import SDLField, SDLSchema
from docschema.core.utils import to_datetime

logger = logging.getLogger(__name__)


# --- Public API --- #

def sdl_to_internal_schema(sdl: SDLSchema) -> Dict[str, FieldBase]:
    """
    Normalize every entry of `sdl['fields']`, keyed by field name.

    Example:
        >>> schema = sdl_to_internal_schema({"fields": {"title": {"type": "string"}}})
        >>> schema["title"].name, schema["title"].is_optional
        ('title', False)
    """
    return {name: sdl_field_to_internal(name, field) for name, field in sdl[C.SCHEMA_FIELDS_KEY].items()}


def sdl_field_to_internal(name: str, field: SDLField) -> FieldBase:
    """
    Normalize one SDL field (recursively for array/object/record).

    An unrecognized or missing `type` yields a plain string field carrying
    only the shared attributes.
    """
    base = _base_attributes(name, field)
    ft = FieldType.parse(field.get("type"))
    builder = _BUILDERS.get(ft)
    if builder is None:
        logger.debug("Field %r has unknown type %r; treating it as a string", name, field.get("type"))
        return StringField(**base)
    return builder(name, field, base)


# --- Internals --- #

def _base_attributes(name: str, field: Mapping[str, Any]) -> Dict[str, Any]:
    base: Dict[str, Any] = {
        "name": name,
        "description": field.get("description") or "",
        "is_optional": bool(field.get("optional", False)),
    }
    if "default" in field:
        base["default_value"] = field["default"]
    return base


def _copy_present(field: Mapping[str, Any], key_map: Mapping[str, str]) -> Dict[str, Any]:
    """Copy `sdl_key -> attr` pairs that are present (and not null) on the input."""
    return {attr: field[key] for key, attr in key_map.items() if field.get(key) is not None}


def _string(name: str, field: Mapping[str, Any], base: Dict[str, Any]) -> FieldBase:
    extra = _copy_present(field, {"minLength": "min_length", "maxLength": "max_length", "format": "format"})
    if "format" in extra and extra["format"] not in C.STRING_FORMATS:
        logger.debug("Field %r has unsupported string format %r; ignoring it", name, extra["format"])
        del extra["format"]
    return StringField(**base, **extra)


def _number(name: str, field: Mapping[str, Any], base: Dict[str, Any]) -> FieldBase:
    extra = _copy_present(field, {"min": "min", "max": "max", "integer": "is_integer", "positive": "is_positive"})
    return NumberField(**base, **extra)


def _boolean(name: str, field: Mapping[str, Any], base: Dict[str, Any]) -> FieldBase:
    return BooleanField(**base)


def _date(name: str, field: Mapping[str, Any], base: Dict[str, Any]) -> FieldBase:
    bounds = {k: to_datetime(v) for k, v in _copy_present(field, {"min": "min", "max": "max"}).items()}
    if "default_value" in base:
        base = {**base, "default_value": _date_default(base["default_value"])}
    return DateField(**base, **bounds)


def _date_default(value: Any) -> Any:
    # YAML loads bare dates as `date`; JSON directives can only hold ISO strings
    if isinstance(value, datetime) or not isinstance(value, (date, str)):
        return value
    try:
        return to_datetime(value)
    except ValueError:
        return value


def _array(name: str, field: Mapping[str, Any], base: Dict[str, Any]) -> FieldBase:
    extra = _copy_present(field, {"minItems": "min_items", "maxItems": "max_items"})
    item = sdl_field_to_internal(f"{name}{C.ARRAY_ITEM_SUFFIX}", field["items"])
    return ArrayField(**base, **extra, item_type=item)


def _object(name: str, field: Mapping[str, Any], base: Dict[str, Any]) -> FieldBase:
    props = tuple(sdl_field_to_internal(key, sub) for key, sub in field["properties"].items())
    return ObjectField(**base, properties=props)


def _enum(name: str, field: Mapping[str, Any], base: Dict[str, Any]) -> FieldBase:
    options = tuple(field.get("options") or ())
    return EnumField(**base, options=options)


def _record(name: str, field: Mapping[str, Any], base: Dict[str, Any]) -> FieldBase:
    value = sdl_field_to_internal(f"{name}{C.RECORD_VALUE_SUFFIX}", field["values"])
    return RecordField(**base, value_type=value)


_Builder = Callable[[str, Mapping[str, Any], Dict[str, Any]], FieldBase]

_BUILDERS: Dict[FieldType, _Builder] = {
    FieldType.STRING: _string,
    FieldType.NUMBER: _number,
    FieldType.BOOLEAN: _boolean,
    FieldType.DATE: _date,
    FieldType.ARRAY: _array,
    FieldType.OBJECT: _object,
    FieldType.ENUM: _enum,
    FieldType.RECORD: _record,
}

if set(_BUILDERS) != FieldType.concrete():
    raise RuntimeError("Normalizer must handle every concrete FieldType")
