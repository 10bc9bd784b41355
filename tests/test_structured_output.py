"""
Tests for oracle output parsing
"""

import pytest

from shared.monitoring import fallback_counts
from shared.structured_output import parse_json_object, parse_or_fallback, strip_code_fences


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('{"a": 1}') == '{"a": 1}'


def test_parse_plain_object():
    assert parse_json_object('{"score": 80}') == {"score": 80}


def test_parse_object_surrounded_by_prose():
    text = 'Here is the analysis you asked for:\n{"score": 80, "tags": ["a"]}\nLet me know!'
    assert parse_json_object(text) == {"score": 80, "tags": ["a"]}


@pytest.mark.parametrize("text", [
    "I could not analyze this page.",
    "[1, 2, 3]",
    '{"score": 80,,}',
])
def test_parse_rejects_non_objects(text):
    with pytest.raises(ValueError):
        parse_json_object(text)


def test_parse_or_fallback_counts_fallbacks():
    before = fallback_counts["unit_test"]
    payload, used_fallback = parse_or_fallback("not json", {"default": True}, "unit_test")
    assert payload == {"default": True}
    assert used_fallback is True
    assert fallback_counts["unit_test"] == before + 1


def test_parse_or_fallback_success():
    payload, used_fallback = parse_or_fallback('```json\n{"ok": 1}\n```', {}, "unit_test")
    assert payload == {"ok": 1}
    assert used_fallback is False
