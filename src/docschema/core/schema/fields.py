#!/usr/bin/env python3
"""
Purpose:
    Defines the internal, normalized field model (`SchemaField`) used by the
    compiler, default generation and value validation. One frozen Pydantic
    model per field type, joined in a discriminated union on `type`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from docschema.core.schema.field_type import FieldType


# --- Shared base --- #

class FieldBase(BaseModel):
    """
    Attributes shared by every internal field.

    `default_value` is only meaningful when it was supplied explicitly; use
    `has_default` rather than testing it against `None`.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Field name; synthesized for array items and record values.")
    description: str = Field(default="", description="Human-readable description.")
    is_optional: bool = Field(default=False, description="Whether the value may be absent.")
    default_value: Any = Field(default=None, description="Value used when none is supplied.")

    @property
    def field_type(self) -> FieldType:
        return FieldType(self.type)  # type: ignore[attr-defined]

    @property
    def has_default(self) -> bool:
        """True if a default was supplied (even a `None` one)."""
        return "default_value" in self.model_fields_set


# --- Per-type models --- #

class StringField(FieldBase):
    type: Literal["string"] = "string"
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    format: Optional[Literal["email", "url", "uuid"]] = None


class NumberField(FieldBase):
    type: Literal["number"] = "number"
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    is_integer: Optional[bool] = None
    is_positive: Optional[bool] = None


class BooleanField(FieldBase):
    type: Literal["boolean"] = "boolean"


class DateField(FieldBase):
    type: Literal["date"] = "date"
    min: Optional[datetime] = None
    max: Optional[datetime] = None


class ArrayField(FieldBase):
    type: Literal["array"] = "array"
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    item_type: "SchemaField" = Field(..., description="Schema describing every element.")


class ObjectField(FieldBase):
    type: Literal["object"] = "object"
    properties: Tuple["SchemaField", ...] = Field(
        default=(),
        description="Named properties, in declaration order.",
    )


class EnumField(FieldBase):
    type: Literal["enum"] = "enum"
    options: Tuple[str, ...] = Field(default=(), description="Allowed values.")


class RecordField(FieldBase):
    type: Literal["record"] = "record"
    value_type: "SchemaField" = Field(..., description="Schema describing every value.")


# --- Discriminated union of all field models --- #

SchemaField = Annotated[
    Union[
        StringField,
        NumberField,
        BooleanField,
        DateField,
        ArrayField,
        ObjectField,
        EnumField,
        RecordField,
    ],
    Field(discriminator="type"),
]

FIELD_MODELS: Dict[FieldType, type[FieldBase]] = {
    FieldType.STRING: StringField,
    FieldType.NUMBER: NumberField,
    FieldType.BOOLEAN: BooleanField,
    FieldType.DATE: DateField,
    FieldType.ARRAY: ArrayField,
    FieldType.OBJECT: ObjectField,
    FieldType.ENUM: EnumField,
    FieldType.RECORD: RecordField,
}

for _model in (ArrayField, ObjectField, RecordField):
    _model.model_rebuild()


# --- Construction helpers --- #

def parse_field(data: Mapping[str, Any] | FieldBase) -> FieldBase:
    """
    Build an internal field from its dict form (snake_case attribute names).

    Field instances are returned unchanged.

    Raises:
        ValueError: for an unknown `type` (or a pydantic `ValidationError`
            when the attributes do not fit the model).
    """
    if isinstance(data, FieldBase):
        return data
    ft = FieldType.parse(data.get("type"))
    model = FIELD_MODELS.get(ft)
    if model is None:
        raise ValueError(f"Unknown field type {data.get('type')!r}")
    return model.model_validate({**data, "type": ft.value})


def parse_fields(data: Mapping[str, Mapping[str, Any] | FieldBase]) -> Dict[str, FieldBase]:
    """
    Build a name -> field mapping from dict forms, using each key as the
    field's `name` when the entry does not carry one.
    """
    out: Dict[str, FieldBase] = {}
    for key, raw in data.items():
        if isinstance(raw, FieldBase):
            out[key] = raw
            continue
        out[key] = parse_field({"name": key, **raw})
    return out


if set(FIELD_MODELS) != FieldType.concrete():
    raise RuntimeError("FIELD_MODELS must define a model for every concrete FieldType")
