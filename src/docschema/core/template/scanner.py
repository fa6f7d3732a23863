#!/usr/bin/env python3
"""
Purpose:
    Extracts the raw SDL schema embedded in a document template.

    Two embeddings are recognized, in this order:
      1. a `schema:` key inside leading YAML front matter
             ---
             schema:
               fields:
                 title: {type: string}
             ---
      2. a template-engine assignment tag holding a JSON object
             {% set schema = {"fields": {"title": {"type": "string"}}} %}

    A template without a schema is the common case and yields `None`
    silently. A broken schema block also yields `None` (with a warning) so it
    never blocks the template from loading.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Tuple

import yaml

from docschema.core import constants as C
from docschema.core.schema.sdl import SDLSchema

logger = logging.getLogger(__name__)

# Sentinel for "front matter parsed, but it declares no schema"
_NO_SCHEMA = object()


# --- Public API --- #

def extract_schema_from_template(template_text: str) -> Optional[SDLSchema]:
    """
    Return the SDL schema declared by `template_text`, or `None`.

    Never raises for malformed input; parse and shape failures are logged
    at WARNING level and reported as `None`.
    """
    candidate = _schema_from_front_matter(template_text)
    if candidate is _NO_SCHEMA:
        candidate = _schema_from_tag(template_text)
        if candidate is _NO_SCHEMA:
            return None
    if candidate is None:
        return None
    return candidate if _looks_like_sdl(candidate) else None


def split_front_matter(template_text: str) -> Tuple[Optional[str], str]:
    """
    Split leading front matter from the body.

    Returns:
        (front_matter, body) where `front_matter` is the raw text between the
        `---` delimiters, or `None` when the template has no front matter (in
        which case `body` is the whole text).
    """
    m = C.FRONT_MATTER_RE.match(template_text)
    if not m:
        return None, template_text
    return m.group("front"), m.group("body")


# --- Internals --- #

def _schema_from_front_matter(template_text: str) -> Any:
    front, _ = split_front_matter(template_text)
    if front is None:
        return _NO_SCHEMA
    try:
        data = yaml.safe_load(front)
    except yaml.YAMLError as e:
        logger.warning("Ignoring template front matter: invalid YAML (%s)", _first_line(e))
        return _NO_SCHEMA
    if not isinstance(data, dict) or C.FRONT_MATTER_SCHEMA_KEY not in data:
        return _NO_SCHEMA
    return data[C.FRONT_MATTER_SCHEMA_KEY]


def _schema_from_tag(template_text: str) -> Any:
    m = C.SCHEMA_TAG_RE.search(template_text)
    if not m:
        return _NO_SCHEMA
    literal = m.group("literal")
    try:
        return json.loads(literal)
    except json.JSONDecodeError as e:
        if C.ZOD_CALL_RE.search(literal):
            logger.debug("Schema directive is not JSON; it holds zod expressions")
            return None
        logger.warning(
            "Ignoring schema directive: invalid JSON (%s at line %d, col %d)", e.msg, e.lineno, e.colno
        )
        return None


def _looks_like_sdl(candidate: Any) -> bool:
    """
    Minimal shape check: a mapping with a `fields` mapping whose entries are
    mappings. Field contents are left to the normalizer.
    """
    if not isinstance(candidate, dict):
        logger.warning("Ignoring schema: expected a mapping, got %s", type(candidate).__name__)
        return False
    fields = candidate.get(C.SCHEMA_FIELDS_KEY)
    if not isinstance(fields, dict):
        logger.warning("Ignoring schema: %r must be a mapping of field declarations", C.SCHEMA_FIELDS_KEY)
        return False
    for name, decl in fields.items():
        if not isinstance(decl, dict):
            logger.warning("Ignoring schema: field %r must be a mapping, got %s", name, type(decl).__name__)
            return False
    return True


def _first_line(exc: Exception) -> str:
    return str(exc).splitlines()[0] if str(exc) else type(exc).__name__
