#!/usr/bin/env python3
"""
Purpose:
    Provides common utility functions such as date coercion, number
    formatting for messages, dictionary merge, and file I/O utilities for
    docschema.
"""

import json
import math
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Dict, Any

from docschema.core.constants import DEFAULT_TEXT_ENCODING


# --- Date Helpers --- #

def as_utc(value: datetime) -> datetime:
    """Return `value` as an aware datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_datetime(value: str | date | datetime) -> datetime:
    """
    Coerce an ISO-8601 string, `date` or `datetime` into an aware `datetime`.

    - `datetime`: returned with a UTC timezone if it was naive
    - `date`: midnight UTC of that day
    - `str`: parsed with `datetime.fromisoformat` (a trailing 'Z' is accepted)

    Raises:
        ValueError: if the string is not a valid ISO-8601 date/datetime.
        TypeError: for any other input type.
    """
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str):
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError as e:
            raise ValueError(f"Invalid date string: {value!r}") from e
        return as_utc(parsed)
    raise TypeError(f"Cannot convert {type(value).__name__} to a date")


# --- Number Helpers --- #

def is_number(value: Any) -> bool:
    """True for int/float values that are not bools and not NaN."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def format_number(value: int | float) -> str:
    """
    Render a number for user-facing messages.

    Integral floats drop their trailing '.0' (100.0 -> '100'); other values
    render as `str()` does.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# --- Generic Utilities --- #

def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two dictionaries (values from 'override' take precedence).
    Non-dict values are overwritten; dict values are merged depth-first.
    """
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


# --- File I/O Helpers --- #

def load_json_file(path: Path) -> Dict[str, Any]:
    """
    Load a JSON file from 'path'. Returns an empty dict if the file is missing.

    Raises:
        ValueError: if the file exists but contains invalid JSON.
    """
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding=DEFAULT_TEXT_ENCODING) as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(
            f"Invalid JSON in {str(path)!r}: {e.msg} (line {e.lineno}, col {e.colno})"
        ) from e


def json_default(value: Any) -> Any:
    """`json.dumps(default=...)` hook rendering datetimes as ISO-8601 strings."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
