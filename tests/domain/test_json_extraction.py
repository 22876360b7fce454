"""Tests for first-balanced-span JSON extraction from free-form oracle text."""

from miro_write.domain.errors import ParseFailure
from miro_write.domain.services.json_extraction import extract_json


def test_object_embedded_in_prose():
    reply = 'Sure! Here are the scores: {"aiWritten": 60, "aiRefined": 30, "humanWritten": 10} Hope that helps.'
    r = extract_json(reply, "object")
    assert r.ok
    assert r.value == {"aiWritten": 60, "aiRefined": 30, "humanWritten": 10}


def test_array_inside_markdown_fence():
    reply = '```json\n[{"classification": "AI", "confidence": 0.9}]\n```'
    r = extract_json(reply, "array")
    assert r.ok
    assert r.value == [{"classification": "AI", "confidence": 0.9}]


def test_nested_structures_and_braces_in_strings():
    reply = 'x {"summary": "uses {curly} and [square] brackets", "inner": {"a": [1, 2]}} y'
    r = extract_json(reply, "object")
    assert r.ok
    assert r.value["summary"] == "uses {curly} and [square] brackets"
    assert r.value["inner"] == {"a": [1, 2]}


def test_escaped_quotes_inside_strings():
    reply = '{"reasoning": "said \\"hello}\\" loudly"}'
    r = extract_json(reply, "object")
    assert r.ok
    assert r.value["reasoning"] == 'said "hello}" loudly'


def test_skips_malformed_span_and_takes_next_one():
    reply = "{not json at all} then {\"ok\": true}"
    r = extract_json(reply, "object")
    assert r.ok
    assert r.value == {"ok": True}


def test_first_span_wins():
    r = extract_json('{"a": 1} {"b": 2}', "object")
    assert r.value == {"a": 1}


def test_shape_filter_prefers_requested_type():
    reply = 'note [1] is irrelevant; result: {"humanWritten": 90}'
    r = extract_json(reply, "object")
    assert r.ok
    assert r.value == {"humanWritten": 90}


def test_any_shape_returns_first_value():
    r = extract_json('prefix [1, 2, 3] {"a": 1}', "any")
    assert r.value == [1, 2, 3]


def test_no_json_is_a_parse_failure_not_an_exception():
    r = extract_json("I cannot help with that.", "object")
    assert not r.ok
    assert isinstance(r.error, ParseFailure)
    assert r.error.raw_preview.startswith("I cannot help")


def test_unbalanced_json_is_a_parse_failure():
    r = extract_json('{"aiWritten": 50, "aiRefined": ', "object")
    assert not r.ok
    assert isinstance(r.error, ParseFailure)


def test_empty_reply_is_a_parse_failure():
    assert not extract_json("", "object").ok
    assert not extract_json(None, "array").ok
