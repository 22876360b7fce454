from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from miro_write.application.ports.telemetry_port import NullTelemetry, TelemetryPort
from miro_write.application.prompts import build_synthesis_messages
from miro_write.application.services.oracle_client import OracleClient
from miro_write.domain.errors import DomainError, InvalidInput, is_fatal
from miro_write.domain.models import DocumentScore, SentenceVerdict
from miro_write.domain.services.scoring import (
    FALLBACK_SUMMARY,
    document_score_from_mapping,
    fallback_document_score,
)
from miro_write.domain.types import Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Synthesis:
    scores: DocumentScore
    summary: str
    used_fallback: bool = False


class SynthesizeScores:
    """
    Document-level percentages and summary from per-sentence verdicts.
    Falls back to the count formula when the oracle's synthesis is unusable.
    """

    def __init__(self, client: OracleClient, telemetry: TelemetryPort | None = None) -> None:
        self.client = client
        self.telemetry = telemetry or NullTelemetry()

    def execute(self, verdicts: Sequence[SentenceVerdict]) -> Result[Synthesis, DomainError]:
        if not verdicts:
            return Result.failure(InvalidInput("no sentence verdicts to aggregate"))

        r = self.client.request_json(build_synthesis_messages(verdicts), shape="object")
        if not r.ok:
            if is_fatal(r.error):
                assert r.error is not None
                return Result.failure(r.error)
            return Result.success(self._fallback(verdicts, type(r.error).__name__))

        payload = r.value
        assert isinstance(payload, dict)
        scores = document_score_from_mapping(payload)
        summary = payload.get("summary")
        if scores is None or not isinstance(summary, str) or not summary.strip():
            return Result.success(self._fallback(verdicts, "IncompleteSynthesis"))

        return Result.success(Synthesis(scores=scores, summary=summary.strip()))

    def _fallback(self, verdicts: Sequence[SentenceVerdict], reason: str) -> Synthesis:
        logger.warning("synthesis fell back to count formula (%s)", reason)
        self.telemetry.incr("miro.synthesis.fallbacks", {"reason": reason})
        return Synthesis(
            scores=fallback_document_score(verdicts),
            summary=FALLBACK_SUMMARY,
            used_fallback=True,
        )
