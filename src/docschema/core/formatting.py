#!/usr/bin/env python3
"""
Formatting helpers for docschema.

- Stable, minimal one-line formatting for Pydantic v2 `ValidationError`.
- Nested-message prefixes used by the value engine.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Sequence

from pydantic import ValidationError


# --- Public API --- #

def format_pydantic_errors_simple(exc: ValidationError) -> List[str]:
    """
    Return stable one-line messages from a Pydantic v2 ValidationError.

    Example:
        tags[1]: String should have at least 2 characters
    """
    errors: Sequence[dict[str, Any]] = exc.errors()
    if not errors:
        return [str(exc).splitlines()[0]]

    msgs: List[str] = []
    for err in errors:
        loc = err.get("loc", ())
        msg = err.get("msg", "Validation error")
        path = _format_error_loc(loc)
        msgs.append(f"{path}: {msg}")
    return msgs


def prefix_message(prefix: str | int, message: str) -> str:
    """Prefix a nested message with the key (or 1-based item label) it belongs to."""
    return f"{prefix}: {message}"


# --- Internals --- #

def _format_error_loc(loc: Iterable[Any]) -> str:
    """
    Convert a Pydantic error `loc` tuple into a dotted path with index suffixes.

    Examples:
        ('tags', 1)              -> "tags[1]"
        ('author', 'email')      -> "author.email"
        ()                       -> "<root>"
    """
    parts: List[str] = []
    for seg in loc:
        if isinstance(seg, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{seg}]"
            else:
                parts.append(f"[{seg}]")
        else:
            parts.append(str(seg))
    return ".".join(parts) if parts else "<root>"
