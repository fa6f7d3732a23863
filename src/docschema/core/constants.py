#!/usr/bin/env python3
"""
Core constants used across docschema.

- Template syntax: front matter delimiters and the schema directive tag.
- Naming: suffixes used for synthesized nested field names.
- String formats: compiled patterns backing the `format` constraint.
- File handling: default text encoding and supported values-file extensions.
"""

import re
from typing import Final

# --- docschema constants --- #

# Key under which a schema is declared in YAML front matter
FRONT_MATTER_SCHEMA_KEY: Final[str] = "schema"

# Key holding the field mapping inside a schema block
SCHEMA_FIELDS_KEY: Final[str] = "fields"

# Suffixes for synthesized names of array items and record values
ARRAY_ITEM_SUFFIX: Final[str] = "Item"
RECORD_VALUE_SUFFIX: Final[str] = "Value"

# Supported string formats
STRING_FORMATS: Final[frozenset[str]] = frozenset({"email", "url", "uuid"})

# Supported values file extensions (CLI)
SUPPORTED_VALUES_EXT: Final[frozenset[str]] = frozenset({".json", ".yml", ".yaml"})

# Default text encoding
DEFAULT_TEXT_ENCODING: Final[str] = "utf-8"

# Default name of the model generated by the schema compiler
DEFAULT_MODEL_NAME: Final[str] = "DocumentValues"


# --- Regular Expressions --- #
# Leading front matter block: '---' line, body, closing '---' line
FRONT_MATTER_RE: re.Pattern[str] = re.compile(
    r"\A---[ \t]*\r?\n(?P<front>.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)(?P<body>.*)\Z",
    re.DOTALL | re.MULTILINE,
)

# {% set schema = { ...json... } %}, first occurrence, non-greedy across lines
SCHEMA_TAG_RE: re.Pattern[str] = re.compile(
    r"\{%-?\s*set\s+schema\s*=\s*(?P<literal>\{.*?\})\s*-?%\}",
    re.DOTALL,
)

# zod builder call inside a schema directive (e.g. `z.string()`)
ZOD_CALL_RE: re.Pattern[str] = re.compile(r"\bz\.[A-Za-z_]+\s*\(")

# Email shape checked by the compiled model (the value engine only checks "@")
EMAIL_RE: re.Pattern[str] = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


# --- Runtime guard --- #
def validate_constants():
    """
    Ensure constants are consistent at runtime.
    """
    if "literal" not in SCHEMA_TAG_RE.groupindex:
        raise RuntimeError("SCHEMA_TAG_RE must capture the directive object as group 'literal'")
    if not {"front", "body"} <= set(FRONT_MATTER_RE.groupindex):
        raise RuntimeError("FRONT_MATTER_RE must capture groups 'front' and 'body'")

validate_constants()
