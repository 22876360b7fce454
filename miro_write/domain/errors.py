"""Domain errors (typed) for detection and humanization.

Why: One error family for the application layer; adapters map transport
     and library exceptions into it so nothing else leaks upward.
"""


class DomainError(Exception):
    """Base class for domain-specific errors."""

    user_message = "An unexpected error occurred."

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.user_message)
        self.message = message or self.user_message


class InvalidInput(DomainError):
    """Rejected before any external call; correctable by the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.user_message = message


class OracleError(DomainError):
    """Base class for failures talking to an external oracle."""


class RateLimited(OracleError):
    """Oracle answered HTTP 429. Not retried from inside the core."""

    user_message = "Rate limit exceeded. Please try again later."
    status_code = 429


class QuotaExhausted(OracleError):
    """Oracle answered HTTP 402. Needs operator action."""

    user_message = "AI credits depleted. Please add credits to continue."
    status_code = 402


class OracleUnavailable(OracleError):
    """Any other non-2xx answer, connection failure or misconfiguration."""

    user_message = "The analysis service is currently unavailable."

    def __init__(self, message: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseFailure(OracleError):
    """Oracle replied, but no usable JSON could be extracted."""

    user_message = "Invalid AI response format"

    def __init__(self, message: str = "", raw_preview: str = "") -> None:
        super().__init__(message)
        self.raw_preview = raw_preview


FATAL_ORACLE_ERRORS: tuple[type[OracleError], ...] = (RateLimited, QuotaExhausted)


def is_fatal(error: BaseException | None) -> bool:
    """Rate and quota limits are never absorbed by a fallback."""
    return isinstance(error, FATAL_ORACLE_ERRORS)


def error_for_status(status_code: int) -> OracleError:
    """Classify a non-2xx oracle status code."""
    if status_code == 429:
        return RateLimited()
    if status_code == 402:
        return QuotaExhausted()
    return OracleUnavailable(f"AI Gateway error: {status_code}", status_code=status_code)
