"""Batch sentence classification.

Why: One oracle request per fixed-size batch keeps prompts bounded; a bad
     batch degrades to default verdicts, rate/quota limits abort the run.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from miro_write.application.ports.telemetry_port import NullTelemetry, TelemetryPort
from miro_write.application.prompts import build_batch_messages
from miro_write.application.services.oracle_client import OracleClient
from miro_write.domain.errors import DomainError, InvalidInput, is_fatal
from miro_write.domain.models import SentenceVerdict, TextUnit
from miro_write.domain.services.scoring import verdict_from_entry
from miro_write.domain.types import Result

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10

_WRAPPER_KEYS = ("sentences", "results", "verdicts", "classifications")


def plan_batches(units: Sequence[TextUnit], batch_size: int) -> list[list[TextUnit]]:
    """Contiguous, order-preserving partition."""
    return [list(units[i : i + batch_size]) for i in range(0, len(units), batch_size)]


def _entries(payload: Any) -> list[Any] | None:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in _WRAPPER_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]
    return None


class ClassifySentences:
    def __init__(
        self,
        client: OracleClient,
        batch_size: int = DEFAULT_BATCH_SIZE,
        telemetry: TelemetryPort | None = None,
    ) -> None:
        self.client = client
        self.batch_size = batch_size
        self.telemetry = telemetry or NullTelemetry()

    def execute(self, units: Sequence[TextUnit]) -> Result[list[SentenceVerdict], DomainError]:
        if self.batch_size < 1:
            return Result.failure(InvalidInput("batch_size must be >= 1"))

        verdicts: list[SentenceVerdict] = []
        batches = plan_batches(units, self.batch_size)
        for number, batch in enumerate(batches, 1):
            r = self.client.request_json(build_batch_messages(batch), shape="any")
            if not r.ok:
                if is_fatal(r.error):
                    assert r.error is not None
                    return Result.failure(r.error)
                logger.warning(
                    "batch %d/%d fell back to default verdicts: %s",
                    number,
                    len(batches),
                    type(r.error).__name__,
                )
                self.telemetry.incr("miro.classify.batch_fallbacks", {"reason": type(r.error).__name__})
                verdicts.extend(SentenceVerdict.default(u.text) for u in batch)
                continue

            entries = _entries(r.value)
            if entries is None:
                logger.warning("batch %d/%d reply was not a verdict array", number, len(batches))
                self.telemetry.incr("miro.classify.batch_fallbacks", {"reason": "ParseFailure"})
                entries = []
            elif len(entries) < len(batch):
                logger.warning(
                    "batch %d/%d returned %d of %d verdicts",
                    number,
                    len(batches),
                    len(entries),
                    len(batch),
                )

            for i, unit in enumerate(batch):
                entry = entries[i] if i < len(entries) else None
                verdicts.append(verdict_from_entry(unit.text, entry))

        return Result.success(verdicts)
