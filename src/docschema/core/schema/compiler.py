#!/usr/bin/env python3
"""
Purpose:
    Compiles raw template SDL into a runtime-generated Pydantic model for
    structural validation of document values.

    This is deliberately separate from the value engine in
    `docschema.core.values.validation`: the generated model is a general
    purpose validator (e.g. for an API accepting document data), while the
    value engine produces per-field messages for form display. Both accept
    the same bounds and the same required/optional semantics, except that
    only this compiler enforces date bounds.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Annotated, Any, Callable, Dict, Literal, Mapping, Optional
from uuid import UUID

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    create_model,
)

from docschema.core import constants as C
from docschema.core.formatting import format_pydantic_errors_simple
from docschema.core.schema.field_type import FieldType
from docschema.core.schema.sdl import SDLField, SDLSchema
from docschema.core.utils import as_utc, to_datetime

logger = logging.getLogger(__name__)


# --- Public API --- #

def sdl_to_model(sdl: SDLSchema, model_name: str = C.DEFAULT_MODEL_NAME) -> type[BaseModel]:
    """
    Compile an SDL schema into a Pydantic model class.

    Behavior:
        - Scalars are strict: "5" is not a number and "true" is not a boolean.
        - Unknown keys are ignored at every object level.
        - Optional fields accept a missing key, `None` or "" (read as
          `None`); fields with a `default` fall back to it when the key is
          missing.
        - Supplied values are always checked against the field's bounds,
          whether or not the field has a default.

    Args:
        sdl: Raw SDL schema (`{"fields": {...}}`).
        model_name: Name given to the generated model class.

    Returns:
        A model class; use `model_validate(values)` (raises `ValidationError`)
        or `check_values(model, values)` for flattened messages.

    Example:
        model = sdl_to_model({"fields": {"title": {"type": "string", "minLength": 3}}})
        model.model_validate({"title": "Hello"}).model_dump(by_alias=True)
    """
    return _model_for_fields(sdl[C.SCHEMA_FIELDS_KEY], model_name)


def sdl_field_to_type(name: str, field: SDLField) -> Any:
    """
    Map one SDL field to a fully constrained annotation (without the
    optional/default wrapping, which belongs to the enclosing model).
    """
    ft = FieldType.parse(field.get("type"))
    compile_fn = _COMPILERS.get(ft)
    if compile_fn is None:
        logger.debug("Field %r has unknown type %r; compiling it as a string", name, field.get("type"))
        return Annotated[str, Field(strict=True)]
    return compile_fn(name, field)


def check_values(model: type[BaseModel], values: Mapping[str, Any]) -> list[str]:
    """
    Validate `values` with a compiled model.

    Returns:
        One "path: message" line per problem; an empty list when valid.
    """
    try:
        model.model_validate(values)
    except ValidationError as e:
        return format_pydantic_errors_simple(e)
    return []


# --- Model construction --- #

class _ValuesModel(BaseModel):
    """Base for generated models; attribute names are positional, aliases carry the field names."""
    model_config = ConfigDict(extra="ignore")


def _model_for_fields(fields: Mapping[str, SDLField], model_name: str) -> type[BaseModel]:
    field_defs: Dict[str, tuple[Any, Any]] = {}
    for index, (name, field) in enumerate(fields.items()):
        field_defs[f"field_{index}"] = _field_definition(name, field)
    return create_model(model_name, __base__=_ValuesModel, **field_defs)  # type: ignore[call-overload]


def _field_definition(name: str, field: SDLField) -> tuple[Any, Any]:
    """
    Wrap a compiled annotation: description, then optional, then default.
    """
    annotation = sdl_field_to_type(name, field)
    description = field.get("description") or None
    optional = bool(field.get("optional", False))
    if optional:
        annotation = Annotated[Optional[annotation], BeforeValidator(_blank_to_none)]

    if "default" in field:
        default = field["default"]
    elif optional:
        default = None
    else:
        default = ...
    return annotation, Field(default, alias=name, description=description)


def _nested_type(name: str, field: SDLField) -> Any:
    """Annotation for an array item or record value (optional allows `None`)."""
    annotation = sdl_field_to_type(name, field)
    return Optional[annotation] if field.get("optional") else annotation


# --- Per-type compilers --- #

def _string(name: str, field: Mapping[str, Any]) -> Any:
    constraints: Dict[str, Any] = {}
    if field.get("minLength") is not None:
        constraints["min_length"] = field["minLength"]
    if field.get("maxLength") is not None:
        constraints["max_length"] = field["maxLength"]
    fmt = field.get("format")
    if fmt in _FORMAT_CHECKS:
        return Annotated[str, Field(strict=True, **constraints), AfterValidator(_format_check(fmt))]
    return Annotated[str, Field(strict=True, **constraints)]


def _number(name: str, field: Mapping[str, Any]) -> Any:
    constraints: Dict[str, Any] = {}
    if field.get("min") is not None:
        constraints["ge"] = field["min"]
    if field.get("max") is not None:
        constraints["le"] = field["max"]
    validators: list[AfterValidator] = [AfterValidator(_reject_nan)]
    if field.get("integer"):
        validators.append(AfterValidator(_require_integral))
    if field.get("positive"):
        constraints["gt"] = 0
    return Annotated[(float, Field(strict=True, **constraints), *validators)]


def _boolean(name: str, field: Mapping[str, Any]) -> Any:
    return Annotated[bool, Field(strict=True)]


def _date(name: str, field: Mapping[str, Any]) -> Any:
    lo = to_datetime(field["min"]) if field.get("min") is not None else None
    hi = to_datetime(field["max"]) if field.get("max") is not None else None
    if lo is None and hi is None:
        return Annotated[datetime, Field(strict=True)]
    return Annotated[datetime, Field(strict=True), AfterValidator(_date_bounds(lo, hi))]


def _array(name: str, field: Mapping[str, Any]) -> Any:
    item = _nested_type(f"{name}{C.ARRAY_ITEM_SUFFIX}", field["items"])
    constraints: Dict[str, Any] = {}
    if field.get("minItems") is not None:
        constraints["min_length"] = field["minItems"]
    if field.get("maxItems") is not None:
        constraints["max_length"] = field["maxItems"]
    return Annotated[list[item], Field(strict=True, **constraints)]  # type: ignore[valid-type]


def _object(name: str, field: Mapping[str, Any]) -> Any:
    return _model_for_fields(field["properties"], model_name=f"{name[:1].upper()}{name[1:]}Object")


def _enum(name: str, field: Mapping[str, Any]) -> Any:
    options = list(field.get("options") or [])
    if not options:
        # a Literal with no members cannot validate anything
        return Annotated[str, Field(strict=True)]
    return Literal[tuple(options)]  # type: ignore[misc,valid-type]


def _record(name: str, field: Mapping[str, Any]) -> Any:
    value = _nested_type(f"{name}{C.RECORD_VALUE_SUFFIX}", field["values"])
    return Annotated[dict[str, value], Field(strict=True)]  # type: ignore[valid-type]


_COMPILERS: Dict[FieldType, Callable[[str, Mapping[str, Any]], Any]] = {
    FieldType.STRING: _string,
    FieldType.NUMBER: _number,
    FieldType.BOOLEAN: _boolean,
    FieldType.DATE: _date,
    FieldType.ARRAY: _array,
    FieldType.OBJECT: _object,
    FieldType.ENUM: _enum,
    FieldType.RECORD: _record,
}

if set(_COMPILERS) != FieldType.concrete():
    raise RuntimeError("Compiler must handle every concrete FieldType")


# --- Predicates --- #

def _blank_to_none(value: Any) -> Any:
    # an empty string counts as "no value" for optional fields
    return None if isinstance(value, str) and value == "" else value


def _reject_nan(value: float) -> float:
    if math.isnan(value):
        raise ValueError("Input should be a number, not NaN")
    return value


def _require_integral(value: float) -> float:
    if not (isinstance(value, int) or value.is_integer()):
        raise ValueError("Input should be an integer")
    return value


def _date_bounds(lo: datetime | None, hi: datetime | None) -> Callable[[datetime], datetime]:
    def check(value: datetime) -> datetime:
        moment = as_utc(value)
        if lo is not None and moment < lo:
            raise ValueError(f"Date should be on or after {lo.isoformat()}")
        if hi is not None and moment > hi:
            raise ValueError(f"Date should be on or before {hi.isoformat()}")
        return value
    return check




# --- String formats --- #

_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)
_UUID_ADAPTER: TypeAdapter[UUID] = TypeAdapter(UUID)


def _parses_as(adapter: TypeAdapter) -> Callable[[str], bool]:
    def check(value: str) -> bool:
        try:
            adapter.validate_python(value)
        except ValidationError:
            return False
        return True
    return check


# format -> (label used in messages, predicate)
_FORMAT_CHECKS: Dict[str, tuple[str, Callable[[str], bool]]] = {
    "email": ("email address", lambda value: C.EMAIL_RE.match(value) is not None),
    "url": ("URL", _parses_as(_URL_ADAPTER)),
    "uuid": ("UUID", _parses_as(_UUID_ADAPTER)),
}

if set(_FORMAT_CHECKS) != C.STRING_FORMATS:
    raise RuntimeError("Compiler must check every supported string format")


def _format_check(fmt: str) -> Callable[[str], str]:
    """Validator keeping the string as-is once it parses in the given format."""
    label, predicate = _FORMAT_CHECKS[fmt]

    def check(value: str) -> str:
        if not predicate(value):
            raise ValueError(f"Input should be a valid {label}")
        return value
    return check
