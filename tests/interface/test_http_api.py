"""Tests for the HTTP API with fake use cases (no oracle, no environment)."""

import pytest
from fastapi.testclient import TestClient

from miro_write.application.dto.humanize_dto import MAX_ITERATIONS_LIMIT, HumanizationParams
from miro_write.domain.errors import (
    InvalidInput,
    OracleUnavailable,
    ParseFailure,
    QuotaExhausted,
    RateLimited,
)
from miro_write.domain.models import (
    Classification,
    DetectionResult,
    DocumentScore,
    HumanizationOutcome,
    LoopStatus,
    SentenceVerdict,
)
from miro_write.domain.types import Result
from miro_write.interface.http import api


class FakeUseCase:
    def __init__(self, result, params=None):
        self.result = result
        self.params = params or HumanizationParams()
        self.requests = []
        self.closed = False

    def close(self):
        self.closed = True

    def execute(self, req):
        self.requests.append(req)
        return self.result


class CrashingUseCase:
    params = HumanizationParams()

    def execute(self, req):
        raise RuntimeError("boom")


DETECTION = DetectionResult(
    overall_scores=DocumentScore(60, 20, 20),
    summary="Mostly AI.",
    sentences=(SentenceVerdict("Moreover, this.", Classification.AI, 0.9, "transition"),),
    word_count=2,
)


@pytest.fixture
def client():
    api.use_cases.clear()
    yield TestClient(api.app)
    api.use_cases.clear()


def test_detect_returns_wire_format(client):
    fake = FakeUseCase(Result.success(DETECTION))
    api.use_cases["detect"] = fake

    resp = client.post("/v1/detect", json={"text": "Moreover, this."})

    assert resp.status_code == 200
    body = resp.json()
    assert body["overallScores"] == {"aiWritten": 60, "aiRefined": 20, "humanWritten": 20}
    assert body["summary"] == "Mostly AI."
    assert body["wordCount"] == 2
    assert body["sentences"][0]["classification"] == "AI"
    assert fake.requests[0].text == "Moreover, this."


@pytest.mark.parametrize(
    ("error", "status", "message"),
    [
        (InvalidInput("Text cannot be empty"), 400, "Text cannot be empty"),
        (RateLimited(), 429, "Rate limit exceeded. Please try again later."),
        (QuotaExhausted(), 402, "AI credits depleted. Please add credits to continue."),
        (OracleUnavailable("AI Gateway error: 500", 500), 500, "AI Gateway error: 500"),
        (ParseFailure("Invalid AI response format"), 500, "Invalid AI response format"),
    ],
)
def test_detect_error_mapping(client, error, status, message):
    api.use_cases["detect"] = FakeUseCase(Result.failure(error))
    resp = client.post("/v1/detect", json={"text": "x"})
    assert resp.status_code == status
    assert resp.json() == {"error": message}


def test_unexpected_exception_is_500_without_details(client):
    api.use_cases["detect"] = CrashingUseCase()
    resp = client.post("/v1/detect", json={"text": "x"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}


def test_missing_text_is_passed_to_use_case(client):
    fake = FakeUseCase(Result.failure(InvalidInput("Text is required and must be a string")))
    api.use_cases["detect"] = fake
    resp = client.post("/v1/detect", json={})
    assert resp.status_code == 400
    assert fake.requests[0].text is None


def test_score_endpoint(client):
    api.use_cases["score"] = FakeUseCase(Result.success(DocumentScore(10, 10, 80)))
    resp = client.post("/v1/score", json={"text": "x"})
    assert resp.status_code == 200
    assert resp.json() == {"aiWritten": 10, "aiRefined": 10, "humanWritten": 80}


def test_humanize_endpoint(client):
    fake = FakeUseCase(Result.success(HumanizationOutcome("rewritten", LoopStatus.CONVERGED, 2)))
    api.use_cases["humanize"] = fake

    resp = client.post(
        "/v1/humanize",
        json={
            "text": "Original.",
            "currentScore": {"aiWritten": 70, "aiRefined": 20, "humanWritten": 10},
            "tone": "professional",
        },
    )

    assert resp.status_code == 200
    assert resp.json() == {"humanizedText": "rewritten", "status": "converged", "iterations": 2}
    req = fake.requests[0]
    assert req.current_score == DocumentScore(70, 20, 10)
    assert req.tone.value == "professional"
    assert req.params is None


def test_humanize_overrides_merge_with_defaults(client):
    fake = FakeUseCase(
        Result.success(HumanizationOutcome("t", LoopStatus.BUDGET_EXHAUSTED, 5)),
        params=HumanizationParams(target_score=80, max_iterations=3),
    )
    api.use_cases["humanize"] = fake

    client.post("/v1/humanize", json={"text": "x", "maxIterations": 5})

    assert fake.requests[0].params == HumanizationParams(target_score=80, max_iterations=5)


def test_humanize_all_zero_score_is_400(client):
    fake = FakeUseCase(Result.success(HumanizationOutcome("t", LoopStatus.CONVERGED, 1)))
    api.use_cases["humanize"] = fake
    resp = client.post(
        "/v1/humanize",
        json={"text": "x", "currentScore": {"aiWritten": 0, "aiRefined": 0, "humanWritten": 0}},
    )
    assert resp.status_code == 400
    assert fake.requests == []


def test_humanize_rate_limit(client):
    api.use_cases["humanize"] = FakeUseCase(Result.failure(RateLimited()))
    resp = client.post("/v1/humanize", json={"text": "x"})
    assert resp.status_code == 429


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


@pytest.mark.parametrize(
    ("body", "field"),
    [
        ({"text": "x", "tone": "angry"}, "tone"),
        ({"text": "x", "currentScore": {"aiWritten": -1, "aiRefined": 50, "humanWritten": 51}}, "aiWritten"),
        ({"text": "x", "maxIterations": 0}, "maxIterations"),
        ({"text": "x", "maxIterations": MAX_ITERATIONS_LIMIT + 1}, "maxIterations"),
        ({"text": "x", "targetScore": 101}, "targetScore"),
    ],
)
def test_malformed_humanize_body_is_400_with_error_shape(client, body, field):
    fake = FakeUseCase(Result.success(HumanizationOutcome("t", LoopStatus.CONVERGED, 1)))
    api.use_cases["humanize"] = fake

    resp = client.post("/v1/humanize", json=body)

    assert resp.status_code == 400
    assert set(resp.json()) == {"error"}
    assert field in resp.json()["error"]
    assert fake.requests == []


def test_iteration_limit_is_accepted(client):
    fake = FakeUseCase(Result.success(HumanizationOutcome("t", LoopStatus.BUDGET_EXHAUSTED, 1)))
    api.use_cases["humanize"] = fake
    resp = client.post("/v1/humanize", json={"text": "x", "maxIterations": MAX_ITERATIONS_LIMIT})
    assert resp.status_code == 200
    assert fake.requests[0].params.max_iterations == MAX_ITERATIONS_LIMIT


def test_shutdown_closes_humanize_use_case():
    api.use_cases.clear()
    fake = FakeUseCase(Result.success(HumanizationOutcome("t", LoopStatus.CONVERGED, 1)))
    api.use_cases["humanize"] = fake
    try:
        with TestClient(api.app):
            assert not fake.closed
        assert fake.closed
    finally:
        api.use_cases.clear()
