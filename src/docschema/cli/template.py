#!/usr/bin/env python3
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from docschema.core.constants import DEFAULT_MODEL_NAME, DEFAULT_TEXT_ENCODING, SUPPORTED_VALUES_EXT
from docschema.core.schema.compiler import check_values, sdl_to_model
from docschema.core.schema.field_type import FieldType
from docschema.core.schema.fields import ArrayField, FieldBase, ObjectField, RecordField
from docschema.core.schema.normalizer import sdl_to_internal_schema
from docschema.core.schema.sdl import SDLSchema
from docschema.core.schema.zod_expr import ZodExpressionError, extract_zod_directive, zod_expression_to_sdl
from docschema.core.template.scanner import extract_schema_from_template
from docschema.core.utils import json_default, to_datetime
from docschema.core.values.defaults import generate_initial_values
from docschema.core.values.validation import validate_values

logger = logging.getLogger(__name__)


def register(subparsers):
    ep = subparsers.add_parser("extract", help="Print the schema declared by a template as JSON.")
    ep.add_argument("template", help="Path to the template file.")
    ep.add_argument("--normalized", action="store_true", help="Print the normalized field model instead.")
    ep.set_defaults(func=extract)

    dp = subparsers.add_parser("defaults", help="Print initial values for a new document as JSON.")
    dp.add_argument("template", help="Path to the template file.")
    dp.set_defaults(func=defaults)

    vp = subparsers.add_parser("validate", help="Validate a values file against a template's schema.")
    vp.add_argument("template", help="Path to the template file.")
    vp.add_argument("values", help="Path to a JSON or YAML values file.")
    vp.add_argument("--strict", action="store_true", help="Also run the compiled structural validator.")
    vp.set_defaults(func=validate)


# --- Commands --- #

def extract(args, cfg: Dict[str, Any]) -> int:
    sdl = load_template_schema(Path(args.template))
    if sdl is None:
        print(f"{args.template}: no schema found")
        return 1
    if args.normalized:
        schema = sdl_to_internal_schema(sdl)
        payload = {name: field.model_dump(exclude_none=True) for name, field in schema.items()}
    else:
        payload = sdl
    print(json.dumps(payload, indent=2, default=json_default))
    return 0


def defaults(args, cfg: Dict[str, Any]) -> int:
    sdl = load_template_schema(Path(args.template))
    if sdl is None:
        print(f"{args.template}: no schema found")
        return 1
    values = generate_initial_values(sdl_to_internal_schema(sdl))
    print(json.dumps(values, indent=2, default=json_default))
    return 0


def validate(args, cfg: Dict[str, Any]) -> int:
    sdl = load_template_schema(Path(args.template))
    if sdl is None:
        print(f"{args.template}: no schema found")
        return 1

    try:
        raw = load_values_file(Path(args.values))
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"{args.values}: Failed to read values ({e})")
        return 1

    schema = sdl_to_internal_schema(sdl)
    values = coerce_dates(raw, schema)

    errors = [f"{name}: {msg}" for name, msg in validate_values(values, schema).items()]
    if args.strict:
        model_name = (cfg.get("compiler") or {}).get("model_name") or DEFAULT_MODEL_NAME
        errors.extend(check_values(sdl_to_model(sdl, model_name), values))

    if errors:
        print(f"{args.values}: Validation Failed")
        for e in errors:
            print(f"  - {e}")
        return 1
    print(f"{args.values}: Validation Passed")
    return 0


# --- Helpers --- #

def load_template_schema(path: Path) -> Optional[SDLSchema]:
    """
    Read a template and return its SDL schema, accepting the zod-expression
    directive when no SDL schema is present.
    """
    text = path.read_text(encoding=DEFAULT_TEXT_ENCODING)
    sdl = extract_schema_from_template(text)
    if sdl is not None:
        return sdl

    exprs = extract_zod_directive(text)
    if not exprs:
        return None
    try:
        return {"fields": {name: zod_expression_to_sdl(expr) for name, expr in exprs.items()}}
    except ZodExpressionError as e:
        logger.warning("Ignoring zod schema directive in %s: %s", path, e)
        return None


def load_values_file(path: Path) -> Dict[str, Any]:
    """Load a JSON or YAML mapping of document values."""
    if path.suffix.lower() not in SUPPORTED_VALUES_EXT:
        raise ValueError(f"unsupported extension {path.suffix!r}")
    text = path.read_text(encoding=DEFAULT_TEXT_ENCODING)
    data = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("top level must be a mapping")
    return data


def coerce_dates(values: Dict[str, Any], schema: Dict[str, FieldBase]) -> Dict[str, Any]:
    """
    Turn ISO strings (JSON) and bare dates (YAML) into datetimes wherever the
    schema expects a date. Values that cannot be parsed are left untouched so
    validation reports them.
    """
    return {key: _coerce(value, schema[key]) if key in schema else value for key, value in values.items()}


def _coerce(value: Any, field: FieldBase) -> Any:
    ft = field.field_type
    if ft is FieldType.DATE:
        try:
            return to_datetime(value)
        except (TypeError, ValueError):
            return value
    if ft is FieldType.ARRAY and isinstance(value, list):
        arr: ArrayField = field  # type: ignore[assignment]
        return [_coerce(v, arr.item_type) for v in value]
    if ft is FieldType.RECORD and isinstance(value, dict):
        rec: RecordField = field  # type: ignore[assignment]
        return {k: _coerce(v, rec.value_type) for k, v in value.items()}
    if ft is FieldType.OBJECT and isinstance(value, dict):
        obj: ObjectField = field  # type: ignore[assignment]
        props = {p.name: p for p in obj.properties}
        return {k: _coerce(v, props[k]) if k in props else v for k, v in value.items()}
    return value
