#!/usr/bin/env python3
import logging

import pytest

from docschema.core.template.scanner import extract_schema_from_template, split_front_matter


YAML_TEMPLATE = """---
schema:
  fields:
    title:
      type: string
      description: The title of the document
    age:
      type: number
      integer: true
      min: 0
    isPublished:
      type: boolean
      default: false
---
# {{ title }}
"""


# --- YAML front matter --- #

def test_extracts_schema_from_front_matter():
    assert extract_schema_from_template(YAML_TEMPLATE) == {
        "fields": {
            "title": {"type": "string", "description": "The title of the document"},
            "age": {"type": "number", "integer": True, "min": 0},
            "isPublished": {"type": "boolean", "default": False},
        }
    }


def test_front_matter_without_schema_returns_none(caplog):
    text = "---\ntitle: Some document\n---\n# Content\n"
    with caplog.at_level(logging.WARNING):
        assert extract_schema_from_template(text) is None
    assert caplog.records == []


def test_invalid_yaml_returns_none():
    text = "---\nschema:\n  fields:\n    title: - invalid yaml\n---\n# Content\n"
    assert extract_schema_from_template(text) is None


@pytest.mark.parametrize("front", [
    "schema: just a string",
    "schema:\n  other: 1",
    "schema:\n  fields: [a, b]",
    "schema:\n  fields:\n    title: plain",
])
def test_badly_shaped_schema_returns_none_with_warning(front, caplog):
    text = f"---\n{front}\n---\nbody\n"
    with caplog.at_level(logging.WARNING):
        assert extract_schema_from_template(text) is None
    assert any("Ignoring schema" in r.getMessage() for r in caplog.records)


def test_front_matter_with_crlf_line_endings():
    text = "---\r\nschema:\r\n  fields:\r\n    title:\r\n      type: string\r\n---\r\nbody\r\n"
    assert extract_schema_from_template(text) == {"fields": {"title": {"type": "string"}}}


# --- Template tag --- #

def test_extracts_schema_from_set_tag():
    text = (
        "# Heading\n"
        '{% set schema = {"fields": {"title": {"type": "string", "minLength": 3}}} %}\n'
        "{{ title }}\n"
    )
    assert extract_schema_from_template(text) == {"fields": {"title": {"type": "string", "minLength": 3}}}


def test_extracts_multiline_set_tag():
    text = """{% set schema = {
  "fields": {
    "status": {"type": "enum", "options": ["draft", "done"]},
    "meta": {"type": "object", "properties": {"owner": {"type": "string"}}}
  }
} %}
Body
"""
    result = extract_schema_from_template(text)
    assert list(result["fields"]) == ["status", "meta"]
    assert result["fields"]["meta"]["properties"]["owner"] == {"type": "string"}


def test_first_set_tag_wins():
    text = (
        '{% set schema = {"fields": {"a": {"type": "string"}}} %}\n'
        '{% set schema = {"fields": {"b": {"type": "number"}}} %}\n'
    )
    assert extract_schema_from_template(text) == {"fields": {"a": {"type": "string"}}}


def test_malformed_json_in_tag_returns_none_and_logs(caplog):
    text = "{% set schema = {fields: {title: {type: 'string'}}} %}\n"
    with caplog.at_level(logging.WARNING, logger="docschema.core.template.scanner"):
        assert extract_schema_from_template(text) is None
    assert any("invalid JSON" in r.getMessage() for r in caplog.records)


def test_zod_directive_is_left_to_zod_reader_quietly(caplog):
    text = "{% set schema = { title: \"z.string().min(3)\", n: z.number() } %}\n"
    with caplog.at_level(logging.DEBUG, logger="docschema.core.template.scanner"):
        assert extract_schema_from_template(text) is None
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert any("zod" in r.getMessage() for r in caplog.records)


def test_front_matter_without_schema_falls_back_to_tag():
    text = '---\ntitle: Doc\n---\n{% set schema = {"fields": {"a": {"type": "boolean"}}} %}\n'
    assert extract_schema_from_template(text) == {"fields": {"a": {"type": "boolean"}}}


def test_broken_front_matter_falls_back_to_tag():
    text = '---\nkey: [unclosed\n---\n{% set schema = {"fields": {"a": {"type": "date"}}} %}\n'
    assert extract_schema_from_template(text) == {"fields": {"a": {"type": "date"}}}


@pytest.mark.parametrize("text", ["", "# Just markdown\n", "{% set title = 'x' %}"])
def test_no_schema_anywhere_returns_none(text):
    assert extract_schema_from_template(text) is None


# --- split_front_matter --- #

def test_split_front_matter():
    front, body = split_front_matter("---\na: 1\n---\n# Body\n")
    assert front == "a: 1"
    assert body == "# Body\n"


def test_split_front_matter_absent():
    assert split_front_matter("# Body\n") == (None, "# Body\n")


def test_split_front_matter_empty_block():
    front, body = split_front_matter("---\n---\nrest")
    assert front == ""
    assert body == "rest"
