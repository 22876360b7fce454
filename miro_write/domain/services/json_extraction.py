"""Locate and decode the first well-formed JSON value in free-form oracle text.

Oracles wrap their JSON in prose, Markdown fences or trailing commentary, so
the reply is never handed to ``json.loads`` as a whole. The scanner walks to
the first ``{`` or ``[``, finds its matching closer while honoring string
literals and escapes, and tries to decode that span. If the span does not
decode, scanning resumes at the next opening bracket.
"""

from __future__ import annotations

import json
from typing import Literal

from miro_write.domain.errors import ParseFailure
from miro_write.domain.types import JSONValue, Result

Shape = Literal["object", "array", "any"]

_OPENERS = {"{": "}", "[": "]"}
PREVIEW_CHARS = 180


def _balanced_end(text: str, start: int) -> int | None:
    """Index just past the bracket that closes ``text[start]``, or None."""
    stack = [_OPENERS[text[start]]]
    in_string = False
    escaped = False
    for pos in range(start + 1, len(text)):
        ch = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch in ("}", "]"):
            if ch != stack[-1]:
                return None
            stack.pop()
            if not stack:
                return pos + 1
    return None


def _matches(value: object, shape: Shape) -> bool:
    if shape == "object":
        return isinstance(value, dict)
    if shape == "array":
        return isinstance(value, list)
    return isinstance(value, (dict, list))


def extract_json(text: str | None, shape: Shape = "any") -> Result[JSONValue, ParseFailure]:
    """Return the first balanced JSON span of the requested shape."""
    if not text or not text.strip():
        return Result.failure(ParseFailure("empty oracle response"))

    preview = text[:PREVIEW_CHARS]
    openers = "{[" if shape == "any" else ("{" if shape == "object" else "[")
    pos = 0
    while True:
        starts = [i for i in (text.find(o, pos) for o in openers) if i != -1]
        if not starts:
            break
        start = min(starts)
        end = _balanced_end(text, start)
        if end is not None:
            try:
                value = json.loads(text[start:end])
            except ValueError:
                value = None
            if value is not None and _matches(value, shape):
                return Result.success(value)
        pos = start + 1

    return Result.failure(ParseFailure(f"no JSON {shape} found in oracle response", raw_preview=preview))
