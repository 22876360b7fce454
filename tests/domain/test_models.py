"""Tests for domain models (DocumentScore, SentenceVerdict, HumanizationSession)."""

import pytest

from miro_write.domain.models import (
    Classification,
    DetectionResult,
    DocumentScore,
    HumanizationOutcome,
    HumanizationSession,
    LoopStatus,
    SentenceVerdict,
)


def _result(human: int) -> DetectionResult:
    score = DocumentScore(ai_written=100 - human, ai_refined=0, human_written=human)
    return DetectionResult(
        overall_scores=score,
        summary="s",
        sentences=(SentenceVerdict("One.", Classification.HUMAN, 0.8, "natural"),),
        word_count=1,
    )


def test_document_score_must_sum_to_100():
    with pytest.raises(ValueError):
        DocumentScore(50, 30, 30)


def test_document_score_rejects_negative_bucket():
    with pytest.raises(ValueError):
        DocumentScore(110, -10, 0)


@pytest.mark.parametrize(
    "values",
    [(0, 0, 0), (-1, 50, 51), (float("nan"), 1, 1), (float("inf"), 1, 1)],
)
def test_normalized_rejects_unusable_values(values):
    with pytest.raises(ValueError):
        DocumentScore.normalized(*values)


def test_document_score_wire_format_is_camel_case():
    assert DocumentScore(10, 20, 70).to_dict() == {
        "aiWritten": 10,
        "aiRefined": 20,
        "humanWritten": 70,
    }
    assert "70% human-written" in DocumentScore(10, 20, 70).describe()


def test_sentence_verdict_confidence_bounds():
    with pytest.raises(ValueError):
        SentenceVerdict("x", Classification.AI, 1.5)
    with pytest.raises(ValueError):
        SentenceVerdict("x", Classification.AI, -0.1)


def test_default_verdict():
    v = SentenceVerdict.default("Some text.")
    assert v.classification is Classification.LIKELY_AI
    assert v.confidence == 0.5
    assert v.reasoning == "Unable to classify"
    assert v.text == "Some text."


def test_detection_result_to_dict():
    d = _result(80).to_dict()
    assert d["overallScores"]["humanWritten"] == 80
    assert d["wordCount"] == 1
    assert d["sentences"] == [
        {"text": "One.", "classification": "Human", "confidence": 0.8, "reasoning": "natural"}
    ]


def test_session_is_append_only_and_numbers_rounds():
    empty = HumanizationSession()
    assert empty.rounds == 0
    assert empty.latest is None
    assert empty.original_text is None

    first = empty.append("original", _result(20))
    second = first.append("rewritten", _result(85))

    assert empty.rounds == 0
    assert first.rounds == 1
    assert second.rounds == 2
    assert [e.round for e in second.entries] == [1, 2]
    assert second.original_text == "original"
    assert second.latest is not None
    assert second.latest.text == "rewritten"


def test_outcome_converged_flag():
    assert HumanizationOutcome("t", LoopStatus.CONVERGED, 1).converged
    assert not HumanizationOutcome("t", LoopStatus.BUDGET_EXHAUSTED, 3).converged
