"""Tests for input validation, sanitization and sentence segmentation."""

import time

import pytest

from miro_write.domain.errors import InvalidInput
from miro_write.domain.services.segmentation import (
    count_words,
    sanitize_text,
    split_into_units,
    validate_text,
)


def test_three_terminators_give_three_units():
    units = split_into_units("A. B! C?")
    assert [u.text for u in units] == ["A.", "B!", "C?"]
    assert [u.index for u in units] == [0, 1, 2]


def test_no_terminator_gives_single_trimmed_unit():
    units = split_into_units("   just some words without an ending   ")
    assert len(units) == 1
    assert units[0].text == "just some words without an ending"


def test_trailing_fragment_becomes_its_own_unit():
    units = split_into_units("First sentence. And a dangling clause")
    assert [u.text for u in units] == ["First sentence.", "And a dangling clause"]


def test_terminator_runs_stay_attached():
    units = split_into_units("Wait... what?! Really.")
    assert [u.text for u in units] == ["Wait...", "what?!", "Really."]


def test_decimal_points_do_not_split():
    units = split_into_units("Pi is 3.14 roughly. Next.")
    assert [u.text for u in units] == ["Pi is 3.14 roughly.", "Next."]


def test_newlines_separate_sentences():
    units = split_into_units("Line one.\nLine two!\n\nLine three?")
    assert [u.text for u in units] == ["Line one.", "Line two!", "Line three?"]


def test_units_are_never_blank():
    units = split_into_units("One.    Two.   ")
    assert all(u.text.strip() for u in units)


@pytest.mark.parametrize("run", [".", "!", "?", "?!."])
def test_long_terminator_run_without_whitespace_splits_in_linear_time(run):
    text = run * (50_000 // len(run)) + "x"
    started = time.perf_counter()
    units = split_into_units(text)
    elapsed = time.perf_counter() - started

    assert len(units) == 1
    assert units[0].text == text
    assert elapsed < 1.0


def test_terminator_run_inside_word_stays_in_sentence():
    units = split_into_units("Visit example.com...now. Done!")
    assert [u.text for u in units] == ["Visit example.com...now.", "Done!"]


def test_whitespace_only_is_rejected():
    with pytest.raises(InvalidInput):
        split_into_units("   \n\t ")


def test_sanitize_strips_control_characters_but_keeps_layout():
    raw = "a\x00b\x07c\x0bd\x0ce\x1ff\x7fg\th\ni\rj"
    assert sanitize_text(raw) == "abcdefg\th\ni\rj"


@pytest.mark.parametrize("value", [None, "", 42, ["text"]])
def test_validate_rejects_missing_or_non_string(value):
    r = validate_text(value)
    assert not r.ok
    assert isinstance(r.error, InvalidInput)
    assert str(r.error) == "Text is required and must be a string"


def test_validate_rejects_blank():
    r = validate_text("   \n ")
    assert not r.ok
    assert str(r.error) == "Text cannot be empty"


def test_validate_rejects_over_length():
    r = validate_text("a" * 11, max_length=10)
    assert not r.ok
    assert str(r.error) == "Text exceeds maximum length of 10 characters"


def test_validate_accepts_exact_length():
    r = validate_text("a" * 10, max_length=10)
    assert r.ok
    assert r.value == "a" * 10


def test_validate_rejects_text_that_is_only_control_characters():
    r = validate_text("\x01\x02\x03")
    assert not r.ok
    assert isinstance(r.error, InvalidInput)


def test_validate_returns_sanitized_text():
    r = validate_text("Hello\x00 world.")
    assert r.ok
    assert r.value == "Hello world."


def test_count_words():
    assert count_words("Don't stop. It's 3 o'clock!") == 5
    assert count_words("") == 0
