#!/usr/bin/env python3
"""
Purpose:
    Derives initial values for a new document from its internal schema.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

from docschema.core.schema.field_type import FieldType
from docschema.core.schema.fields import EnumField, FieldBase, ObjectField

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# --- Public API --- #

def generate_initial_values(
    schema: Mapping[str, FieldBase],
    *,
    clock: Optional[Clock] = None,
) -> Dict[str, Any]:
    """
    Build a value for every top-level field.

    An explicit default is used verbatim; otherwise each type gets an empty
    value ("" / 0 / False / now / [] / {} / first enum option), and objects
    are filled property by property with the same rule.

    Args:
        schema: Field name -> internal field.
        clock: Source of "now" for date fields without a default
            (defaults to the current UTC time).
    """
    now = clock or utc_now
    return {key: default_for_field(field, clock=now) for key, field in schema.items()}


def default_for_field(field: FieldBase, *, clock: Clock = utc_now) -> Any:
    if field.has_default:
        return field.default_value

    ft = field.field_type
    if ft is FieldType.STRING:
        return ""
    if ft is FieldType.NUMBER:
        return 0
    if ft is FieldType.BOOLEAN:
        return False
    if ft is FieldType.DATE:
        return clock()
    if ft is FieldType.ARRAY:
        return []
    if ft is FieldType.RECORD:
        return {}
    if ft is FieldType.ENUM:
        enum_field: EnumField = field  # type: ignore[assignment]
        return enum_field.options[0] if enum_field.options else ""
    if ft is FieldType.OBJECT:
        obj: ObjectField = field  # type: ignore[assignment]
        return {prop.name: default_for_field(prop, clock=clock) for prop in obj.properties}
    raise ValueError(f"No default rule for field type {ft.value!r}")
