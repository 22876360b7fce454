from __future__ import annotations

import logging
from typing import Any

import httpx

from miro_write.application.ports.bulk_humanizer_port import BulkHumanizerPort
from miro_write.domain.errors import OracleError, OracleUnavailable, ParseFailure, error_for_status
from miro_write.domain.types import Result

logger = logging.getLogger(__name__)

# The service has answered under each of these names over time.
_TEXT_FIELDS = ("humanizedText", "text", "result")


class HttpBulkHumanizerAdapter(BulkHumanizerPort):
    def __init__(
        self,
        url: str,
        api_key: str,
        mode: str = "ultra",
        timeout_s: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self.mode = mode
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self.client = client or httpx.Client(timeout=httpx.Timeout(timeout_s), headers=headers)
        if client is not None:
            self.client.headers.update(headers)

    def close(self) -> None:
        self.client.close()

    @staticmethod
    def _extract_text(payload: Any) -> str | None:
        if not isinstance(payload, dict):
            return None
        for field in _TEXT_FIELDS:
            value = payload.get(field)
            if isinstance(value, str) and value.strip():
                return value
        return None

    def humanize(self, text: str) -> Result[str, OracleError]:
        try:
            response = self.client.post(self.url, json={"text": text, "mode": self.mode})
        except httpx.HTTPError as ex:
            logger.warning("bulk humanizer request failed: %s", ex)
            return Result.failure(OracleUnavailable(f"bulk humanizer unreachable: {ex}"))

        if response.status_code >= 400:
            logger.warning(
                "bulk humanizer http error %s: %s",
                response.status_code,
                response.text[:180],
            )
            return Result.failure(error_for_status(response.status_code))

        try:
            payload = response.json()
        except ValueError:
            logger.warning("bulk humanizer unparseable response: %s", response.text[:180])
            return Result.failure(ParseFailure("bulk humanizer returned non-JSON", response.text[:180]))

        rewritten = self._extract_text(payload)
        if rewritten is None:
            return Result.failure(ParseFailure("bulk humanizer response lacks text field", str(payload)[:180]))
        return Result.success(rewritten)
