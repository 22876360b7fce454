from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from miro_write.domain.errors import OracleError
from miro_write.domain.types import Result


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "system" | "user" | "assistant"
    content: str


@runtime_checkable
class OraclePort(Protocol):
    """Text-completion oracle used for scoring and for rewriting.

    Adapters classify transport failures themselves: 429 becomes
    ``RateLimited``, 402 ``QuotaExhausted``, anything else
    ``OracleUnavailable``. The reply text is returned as-is.
    """

    def complete(
        self, messages: Sequence[ChatMessage], temperature: float | None = None
    ) -> Result[str, OracleError]: ...
