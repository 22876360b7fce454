"""End-to-end tests for the detection use case with a fake oracle."""

import json

from miro_write.application.dto.detection_dto import DetectRequest
from miro_write.application.services.oracle_client import OracleClient
from miro_write.application.use_cases.classify_sentences import ClassifySentences
from miro_write.application.use_cases.detect_ai_text import DetectAIText
from miro_write.application.use_cases.synthesize_scores import SynthesizeScores
from miro_write.domain.errors import InvalidInput, RateLimited
from miro_write.domain.models import Classification, DocumentScore
from miro_write.domain.services.scoring import FALLBACK_SUMMARY
from miro_write.domain.types import Result


class ScriptedOracle:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = 0

    def complete(self, messages, temperature=None):
        self.calls += 1
        if not self.replies:
            raise AssertionError("unexpected oracle call")
        reply = self.replies.pop(0)
        return reply if isinstance(reply, Result) else Result.success(reply)


class RecordingTelemetry:
    def __init__(self):
        self.observed = []

    def incr(self, name, tags=None):
        pass

    def observe(self, name, value, tags=None):
        self.observed.append((name, value))


def _detector(oracle, batch_size=10, max_text_length=50_000, telemetry=None):
    client = OracleClient(oracle)
    return DetectAIText(
        classifier=ClassifySentences(client, batch_size=batch_size),
        synthesizer=SynthesizeScores(client),
        max_text_length=max_text_length,
        telemetry=telemetry,
    )


BATCH = json.dumps(
    [
        {"classification": "AI", "confidence": 0.9, "reasoning": "transition word"},
        {"classification": "Human", "confidence": 0.8, "reasoning": "personal"},
    ]
)


def test_detect_happy_path():
    oracle = ScriptedOracle(
        [BATCH, '{"aiWritten": 50, "aiRefined": 0, "humanWritten": 50, "summary": "Half and half."}']
    )
    telemetry = RecordingTelemetry()

    r = _detector(oracle, telemetry=telemetry).execute(
        DetectRequest(text="Furthermore, synergy matters. I burnt my toast today!")
    )

    assert r.ok
    result = r.value
    assert [s.classification for s in result.sentences] == [Classification.AI, Classification.HUMAN]
    assert result.overall_scores == DocumentScore(50, 0, 50)
    assert result.summary == "Half and half."
    assert result.word_count == 8
    assert telemetry.observed == [("miro.detect.sentences", 2.0)]
    assert oracle.calls == 2


def test_detect_falls_back_when_synthesis_is_garbage():
    oracle = ScriptedOracle([BATCH, "whatever"])
    r = _detector(oracle).execute(DetectRequest(text="One thing. Another thing."))
    assert r.ok
    assert r.value.summary == FALLBACK_SUMMARY
    assert r.value.overall_scores == DocumentScore(50, 0, 50)


def test_detect_rate_limit_in_classification_skips_synthesis():
    oracle = ScriptedOracle([Result.failure(RateLimited())])
    r = _detector(oracle).execute(DetectRequest(text="One. Two."))
    assert isinstance(r.error, RateLimited)
    assert oracle.calls == 1


def test_over_length_input_makes_zero_oracle_calls():
    oracle = ScriptedOracle([])
    r = _detector(oracle, max_text_length=10).execute(DetectRequest(text="x" * 11))
    assert isinstance(r.error, InvalidInput)
    assert str(r.error) == "Text exceeds maximum length of 10 characters"
    assert oracle.calls == 0


def test_non_string_input_makes_zero_oracle_calls():
    oracle = ScriptedOracle([])
    r = _detector(oracle).execute(DetectRequest(text=123))
    assert isinstance(r.error, InvalidInput)
    assert oracle.calls == 0


def test_wire_shape():
    oracle = ScriptedOracle(
        [BATCH, '{"aiWritten": 50, "aiRefined": 0, "humanWritten": 50, "summary": "ok"}']
    )
    d = _detector(oracle).execute(DetectRequest(text="One. Two.")).value.to_dict()
    assert set(d) == {"overallScores", "summary", "sentences", "wordCount"}
    assert set(d["overallScores"]) == {"aiWritten", "aiRefined", "humanWritten"}
