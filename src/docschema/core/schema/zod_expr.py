#!/usr/bin/env python3
"""
Purpose:
    Supports the older schema directive whose values are zod builder chains
    rather than SDL objects:

        {% set schema = {
            title: "z.string().min(3).describe('Title')",
            tags: z.array(z.string()).max(5).optional()
        } %}

    Each chain is parsed into an SDL field dict and then normalized with
    `sdl_field_to_internal`, so the result is the same internal model the
    SDL path produces.

Grammar (informal):
    chain   := 'z' ('.' call)+
    call    := IDENT '(' [value (',' value)*] ')'
    value   := chain | STRING | NUMBER | true | false | null | object | array
    object  := '{' [key ':' value (',' key ':' value)*] [','] '}'
    array   := '[' [value (',' value)*] [','] ']'
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from docschema.core import constants as C
from docschema.core.schema.fields import FieldBase
from docschema.core.schema.normalizer import sdl_field_to_internal
from docschema.core.schema.sdl import SDLField

logger = logging.getLogger(__name__)


class ZodExpressionError(ValueError):
    """Raised when a zod expression cannot be parsed."""


# --- Public API --- #

def extract_zod_directive(template_text: str) -> Optional[Dict[str, str]]:
    """
    Return `{field name: zod expression}` from a `{% set schema = {...} %}`
    directive, or `None` if there is no directive or it is not in zod form.

    Expressions may be quoted or written inline; inline ones are returned as
    their source text.
    """
    m = C.SCHEMA_TAG_RE.search(template_text)
    if not m:
        return None
    source = m.group("literal")
    try:
        parser = _Parser(source)
        entries = parser.parse_object_entries()
        parser.expect_end()
    except ZodExpressionError as e:
        logger.warning("Ignoring zod schema directive: %s", e)
        return None

    out: Dict[str, str] = {}
    for key, (value, text) in entries.items():
        if isinstance(value, _Chain):
            out[key] = text
        elif isinstance(value, str):
            out[key] = value
        else:
            logger.debug("Schema directive entry %r is not a zod expression", key)
            return None
    return out


def zod_expression_to_sdl(expression: str) -> SDLField:
    """
    Parse one zod chain (e.g. "z.number().int().min(0)") into an SDL field dict.

    Raises:
        ZodExpressionError: if the expression is malformed.
    """
    parser = _Parser(expression.strip())
    value = parser.parse_value()
    parser.expect_end()
    if not isinstance(value, _Chain):
        raise ZodExpressionError(f"Expected a zod expression, got {expression!r}")
    return value.sdl


def parse_zod_schema(schema: Mapping[str, str]) -> Dict[str, FieldBase]:
    """Normalize `{field name: zod expression}` into internal fields."""
    return {name: sdl_field_to_internal(name, zod_expression_to_sdl(expr)) for name, expr in schema.items()}


# --- Tokenizer --- #

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
  | (?P<number>-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
  | (?P<ident>[A-Za-z_$][A-Za-z0-9_$]*)
  | (?P<punct>[.(){}\[\],:])
    """,
    re.VERBOSE,
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", "'": "'", '"': '"'}


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str
    start: int
    end: int


def _tokenize(source: str) -> List[_Token]:
    tokens: List[_Token] = []
    pos = 0
    while pos < len(source):
        m = _TOKEN_RE.match(source, pos)
        if not m:
            raise ZodExpressionError(f"Unexpected character {source[pos]!r} at offset {pos}")
        kind = m.lastgroup or ""
        if kind != "ws":
            tokens.append(_Token(kind, m.group(), m.start(), m.end()))
        pos = m.end()
    return tokens


def _unquote(text: str) -> str:
    body = text[1:-1]
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


# --- Parser --- #

@dataclass
class _Chain:
    """A parsed zod chain and the SDL it describes."""
    sdl: Dict[str, Any]


class _Parser:
    def __init__(self, source: str):
        self.source = source
        self.tokens = _tokenize(source)
        self.pos = 0

    # token helpers
    def peek(self) -> Optional[_Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self) -> _Token:
        tok = self.peek()
        if tok is None:
            raise ZodExpressionError("Unexpected end of expression")
        self.pos += 1
        return tok

    def accept(self, text: str) -> bool:
        tok = self.peek()
        if tok is not None and tok.kind != "string" and tok.text == text:
            self.pos += 1
            return True
        return False

    def expect(self, text: str) -> _Token:
        tok = self.next()
        if tok.kind == "string" or tok.text != text:
            raise ZodExpressionError(f"Expected {text!r} at offset {tok.start}, got {tok.text!r}")
        return tok

    def expect_end(self) -> None:
        tok = self.peek()
        if tok is not None:
            raise ZodExpressionError(f"Unexpected {tok.text!r} at offset {tok.start}")

    # grammar
    def parse_value(self) -> Any:
        tok = self.peek()
        if tok is None:
            raise ZodExpressionError("Unexpected end of expression")
        if tok.kind == "string":
            self.pos += 1
            return _unquote(tok.text)
        if tok.kind == "number":
            self.pos += 1
            return float(tok.text) if any(c in tok.text for c in ".eE") else int(tok.text)
        if tok.text == "{":
            return {k: v for k, (v, _) in self.parse_object_entries().items()}
        if tok.text == "[":
            return self.parse_array()
        if tok.kind == "ident":
            if tok.text in ("true", "false"):
                self.pos += 1
                return tok.text == "true"
            if tok.text in ("null", "undefined"):
                self.pos += 1
                return None
            if tok.text == "z":
                return self.parse_chain()
        raise ZodExpressionError(f"Unexpected {tok.text!r} at offset {tok.start}")

    def parse_object_entries(self) -> Dict[str, tuple[Any, str]]:
        """Parse `{key: value, ...}`; each entry keeps its value's source text."""
        self.expect("{")
        entries: Dict[str, tuple[Any, str]] = {}
        while not self.accept("}"):
            key_tok = self.next()
            if key_tok.kind == "string":
                key = _unquote(key_tok.text)
            elif key_tok.kind == "ident":
                key = key_tok.text
            else:
                raise ZodExpressionError(f"Expected a property name at offset {key_tok.start}")
            self.expect(":")
            start = self.peek()
            value = self.parse_value()
            end = self.tokens[self.pos - 1]
            text = self.source[start.start:end.end] if start is not None else ""
            entries[key] = (value, text)
            if not self.accept(","):
                self.expect("}")
                break
        return entries

    def parse_array(self) -> List[Any]:
        self.expect("[")
        items: List[Any] = []
        while not self.accept("]"):
            items.append(self.parse_value())
            if not self.accept(","):
                self.expect("]")
                break
        return items

    def parse_call(self) -> tuple[str, List[Any]]:
        name_tok = self.next()
        if name_tok.kind != "ident":
            raise ZodExpressionError(f"Expected a method name at offset {name_tok.start}")
        self.expect("(")
        args: List[Any] = []
        while not self.accept(")"):
            args.append(self.parse_value())
            if not self.accept(","):
                self.expect(")")
                break
        return name_tok.text, args

    def parse_chain(self) -> _Chain:
        self.expect("z")
        self.expect(".")
        name, args = self.parse_call()
        sdl = _constructor(name, args)
        while self.accept("."):
            method, margs = self.parse_call()
            _apply_modifier(sdl, method, margs)
        return _Chain(sdl)


# --- Chain semantics --- #

def _chain_arg(args: List[Any], index: int, what: str) -> Dict[str, Any]:
    if len(args) <= index or not isinstance(args[index], _Chain):
        raise ZodExpressionError(f"{what} expects a zod expression argument")
    return args[index].sdl


def _constructor(name: str, args: List[Any]) -> Dict[str, Any]:
    if name in ("string", "number", "boolean", "date"):
        return {"type": name}
    if name == "array":
        return {"type": "array", "items": _chain_arg(args, 0, "z.array")}
    if name == "object":
        if not args or not isinstance(args[0], dict):
            raise ZodExpressionError("z.object expects an object argument")
        props: Dict[str, Any] = {}
        for key, value in args[0].items():
            if not isinstance(value, _Chain):
                raise ZodExpressionError(f"z.object property {key!r} must be a zod expression")
            props[key] = value.sdl
        return {"type": "object", "properties": props}
    if name == "enum":
        if not args or not isinstance(args[0], list) or not all(isinstance(o, str) for o in args[0]):
            raise ZodExpressionError("z.enum expects a list of strings")
        return {"type": "enum", "options": list(args[0])}
    if name == "record":
        # z.record(values) or z.record(keys, values)
        return {"type": "record", "values": _chain_arg(args, len(args) - 1 if args else 0, "z.record")}
    raise ZodExpressionError(f"Unsupported zod type z.{name}()")


# min/max target keys per SDL type
_BOUND_KEYS: Dict[str, tuple[str, str]] = {
    "string": ("minLength", "maxLength"),
    "number": ("min", "max"),
    "date": ("min", "max"),
    "array": ("minItems", "maxItems"),
}


def _apply_modifier(sdl: Dict[str, Any], method: str, args: List[Any]) -> None:
    ftype = sdl["type"]
    if method in ("min", "max", "length") and ftype in _BOUND_KEYS:
        if not args:
            raise ZodExpressionError(f".{method}() expects an argument")
        lo_key, hi_key = _BOUND_KEYS[ftype]
        if method in ("min", "length"):
            sdl[lo_key] = args[0]
        if method in ("max", "length"):
            sdl[hi_key] = args[0]
    elif method == "nonempty" and ftype in ("string", "array"):
        sdl[_BOUND_KEYS[ftype][0]] = 1
    elif method == "int" and ftype == "number":
        sdl["integer"] = True
    elif method == "positive" and ftype == "number":
        sdl["positive"] = True
    elif method in C.STRING_FORMATS and ftype == "string":
        sdl["format"] = method
    elif method == "optional":
        sdl["optional"] = True
    elif method == "default":
        sdl["default"] = args[0] if args else None
    elif method == "describe":
        if not args or not isinstance(args[0], str):
            raise ZodExpressionError(".describe() expects a string")
        sdl["description"] = args[0]
    else:
        logger.debug("Ignoring unsupported zod modifier .%s() on %s", method, ftype)
