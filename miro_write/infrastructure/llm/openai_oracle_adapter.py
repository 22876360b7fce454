import logging
from collections.abc import Sequence
from dataclasses import dataclass
from importlib import import_module
from typing import Any, cast

from miro_write.application.ports.oracle_port import ChatMessage, OraclePort
from miro_write.domain.errors import OracleError, OracleUnavailable, error_for_status
from miro_write.domain.types import Result

logger = logging.getLogger(__name__)


@dataclass
class OpenAIOracleAdapter(OraclePort):
    base_url: str  # e.g. "https://ai.gateway.lovable.dev/v1"
    api_key: str = ""
    model: str = "google/gemini-2.5-flash"
    temperature: float = 0.2
    max_tokens: int = 4096
    timeout_s: float | None = None

    def __post_init__(self) -> None:
        # Defer import of OpenAI to complete() to avoid hard dependency in tests
        self._client: Any | None = None

    def _get_client(self) -> Any:
        if self._client is None:
            module = import_module("openai")
            kwargs: dict[str, Any] = {
                "base_url": self.base_url,
                "api_key": self.api_key,
                "max_retries": 0,  # 429/402 surface to the caller untouched
            }
            if self.timeout_s is not None:
                kwargs["timeout"] = self.timeout_s
            self._client = module.OpenAI(**kwargs)
        return self._client

    def complete(
        self, messages: Sequence[ChatMessage], temperature: float | None = None
    ) -> Result[str, OracleError]:
        if not self.api_key:
            logger.error("oracle API key not configured for model %s", self.model)
            return Result.failure(OracleUnavailable("Service configuration error"))

        try:
            client = self._get_client()
            payload: Any = [m.__dict__ for m in messages]
            resp: Any = client.chat.completions.create(
                model=self.model,
                messages=cast(Any, payload),
                temperature=self.temperature if temperature is None else temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as ex:  # noqa: BLE001
            # Translate external errors to domain-specific errors
            return Result.failure(self._translate(ex))

        choices = getattr(resp, "choices", None) or []
        if not choices:
            return Result.failure(OracleUnavailable("AI Gateway returned no choices"))
        return Result.success(choices[0].message.content or "")

    def _translate(self, ex: Exception) -> OracleError:
        status = getattr(ex, "status_code", None)
        if isinstance(status, int):
            logger.error("AI Gateway error for %s: %s %s", self.model, status, ex)
            return error_for_status(status)
        logger.error("AI Gateway unreachable for %s: %s", self.model, ex)
        return OracleUnavailable(f"LLM communication failed: {ex}")
