#!/usr/bin/env python3
"""
Purpose:
    Defines the FieldType enumeration for docschema template schemas, along
    with a lenient parser.
"""

from __future__ import annotations

from enum import Enum


class FieldType(str, Enum):
    """
    Supported field types in a template schema.

    - string  : textual scalar
    - number  : numeric scalar (int or float)
    - boolean : true/false scalar
    - date    : point in time
    - array   : homogeneous list with one item schema
    - object  : mapping with named, ordered properties
    - enum    : string constrained to a fixed set of options
    - record  : mapping with free-form keys and one value schema
    - invalid : unrecognized/unsupported type (returned by `parse`)
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    OBJECT = "object"
    ENUM = "enum"
    RECORD = "record"
    INVALID = "invalid"

    # --- Parsing helpers --- #

    @classmethod
    def parse(cls, value: str | FieldType | None) -> FieldType:
        """
        Coerce arbitrary input to a `FieldType`.

        - `FieldType` instance → returned as-is
        - `None` or unknown strings → `FieldType.INVALID`
        - strings are trimmed and lowercased before lookup

        Examples
        --------
        >>> FieldType.parse(" Record ")
        <FieldType.RECORD: 'record'>
        >>> FieldType.parse(None)
        <FieldType.INVALID: 'invalid'>
        >>> FieldType.parse("tuple")
        <FieldType.INVALID: 'invalid'>
        """
        if isinstance(value, FieldType):
            return value
        if value is None:
            return cls.INVALID
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.INVALID

    @classmethod
    def concrete(cls) -> frozenset[FieldType]:
        """Every real field type (all members except INVALID)."""
        return frozenset(ft for ft in cls if ft is not cls.INVALID)

