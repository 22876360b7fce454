from __future__ import annotations

import re

from miro_write.domain.errors import InvalidInput
from miro_write.domain.models import TextUnit
from miro_write.domain.types import Result

DEFAULT_MAX_TEXT_LENGTH = 50_000

# NUL..BS, VT, FF, SO..US, DEL. Tab, LF and CR survive.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

# A sentence ends after a run of terminators followed by whitespace or the
# end of the text; "3.14" and "example.com" stay inside their sentence.
_TERMINATORS = re.compile(r"[.!?]+")

_WORD = re.compile(r"\b[\w']+\b", flags=re.UNICODE)


def sanitize_text(text: str) -> str:
    """Strip control characters that must never reach an oracle."""
    return _CONTROL_CHARS.sub("", text)


def validate_text(text: object, max_length: int = DEFAULT_MAX_TEXT_LENGTH) -> Result[str, InvalidInput]:
    """Validate raw user input and return the sanitized text."""
    if not text or not isinstance(text, str):
        return Result.failure(InvalidInput("Text is required and must be a string"))
    if not text.strip():
        return Result.failure(InvalidInput("Text cannot be empty"))
    if len(text) > max_length:
        return Result.failure(
            InvalidInput(f"Text exceeds maximum length of {max_length} characters")
        )

    sanitized = sanitize_text(text)
    if not sanitized.strip():
        return Result.failure(InvalidInput("Text cannot be empty"))
    return Result.success(sanitized)


def split_into_units(text: str) -> list[TextUnit]:
    """Split sanitized text into sentence units, terminators attached."""
    stripped = text.strip()
    if not stripped:
        raise InvalidInput("Text cannot be empty")

    pieces: list[str] = []
    start = 0
    for m in _TERMINATORS.finditer(stripped):
        end = m.end()
        if end == len(stripped) or stripped[end].isspace():
            pieces.append(stripped[start:end].strip())
            start = end
    pieces.append(stripped[start:].strip())
    pieces = [p for p in pieces if p]
    if not pieces:
        pieces = [stripped]
    return [TextUnit(text=p, index=i) for i, p in enumerate(pieces)]


def count_words(text: str) -> int:
    return len(_WORD.findall(text))
