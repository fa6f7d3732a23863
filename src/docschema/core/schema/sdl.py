#!/usr/bin/env python3
"""
Purpose:
    Typing for the raw, user-authored schema definition language (SDL) as it
    appears in a template. Raw SDL is plain JSON/YAML data: these TypedDicts
    document its shape but nothing enforces it before normalization.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, TypedDict, Union


class SDLFieldBase(TypedDict, total=False):
    """Keys shared by every SDL field."""
    type: str
    description: str
    optional: bool
    default: Any


class SDLStringField(SDLFieldBase, total=False):
    minLength: int
    maxLength: int
    format: Literal["email", "url", "uuid"]


class SDLNumberField(SDLFieldBase, total=False):
    min: float
    max: float
    integer: bool
    positive: bool


class SDLBooleanField(SDLFieldBase, total=False):
    pass


class SDLDateField(SDLFieldBase, total=False):
    min: Union[str, datetime]
    max: Union[str, datetime]


class SDLArrayField(SDLFieldBase, total=False):
    items: "SDLField"
    minItems: int
    maxItems: int


class SDLObjectField(SDLFieldBase, total=False):
    properties: Dict[str, "SDLField"]


class SDLEnumField(SDLFieldBase, total=False):
    options: List[str]


class SDLRecordField(SDLFieldBase, total=False):
    values: "SDLField"


SDLField = Union[
    SDLStringField,
    SDLNumberField,
    SDLBooleanField,
    SDLDateField,
    SDLArrayField,
    SDLObjectField,
    SDLEnumField,
    SDLRecordField,
]


class SDLSchema(TypedDict):
    """A template schema: field name -> SDL field."""
    fields: Dict[str, SDLField]
