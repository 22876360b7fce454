from typing import Protocol, runtime_checkable

from miro_write.domain.errors import OracleError
from miro_write.domain.types import Result


@runtime_checkable
class BulkHumanizerPort(Protocol):
    """Optional third-party rewriter used as a best-effort pre-pass."""

    def humanize(self, text: str) -> Result[str, OracleError]: ...

    def close(self) -> None: ...
