"""Scoring oracle client: one round trip plus JSON extraction.

Why: Every scoring call site needs the same discipline (transport errors
     pass through typed, unparseable replies become ParseFailure values) so
     callers can decide between fallback and abort.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from miro_write.application.ports.oracle_port import ChatMessage, OraclePort
from miro_write.application.ports.telemetry_port import NullTelemetry, TelemetryPort
from miro_write.domain.errors import OracleError
from miro_write.domain.services.json_extraction import Shape, extract_json
from miro_write.domain.types import JSONValue, Result

logger = logging.getLogger(__name__)


class OracleClient:
    def __init__(
        self,
        oracle: OraclePort,
        temperature: float | None = None,
        telemetry: TelemetryPort | None = None,
        name: str = "scoring",
    ) -> None:
        self.oracle = oracle
        self.temperature = temperature
        self.telemetry = telemetry or NullTelemetry()
        self.name = name

    def request_json(
        self, messages: Sequence[ChatMessage], shape: Shape = "object"
    ) -> Result[JSONValue, OracleError]:
        reply = self.oracle.complete(messages, temperature=self.temperature)
        if not reply.ok:
            assert reply.error is not None
            logger.error(
                "%s oracle call failed: %s: %s",
                self.name,
                type(reply.error).__name__,
                reply.error,
            )
            self.telemetry.incr(
                "miro.oracle.errors",
                {"oracle": self.name, "error_type": type(reply.error).__name__},
            )
            return Result.failure(reply.error)

        parsed = extract_json(reply.value, shape)
        if not parsed.ok:
            assert parsed.error is not None
            logger.warning(
                "%s oracle reply had no usable JSON %s: %r",
                self.name,
                shape,
                parsed.error.raw_preview,
            )
            self.telemetry.incr(
                "miro.oracle.errors", {"oracle": self.name, "error_type": "ParseFailure"}
            )
            return Result.failure(parsed.error)
        return Result.success(parsed.value)
