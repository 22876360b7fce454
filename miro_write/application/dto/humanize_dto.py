from __future__ import annotations

from dataclasses import dataclass

from miro_write.domain.errors import InvalidInput
from miro_write.domain.models import DocumentScore, Tone

DEFAULT_TARGET_SCORE = 80
DEFAULT_MAX_ITERATIONS = 3
# Each iteration costs one rewrite and one rescoring call
MAX_ITERATIONS_LIMIT = 10


@dataclass(frozen=True)
class HumanizationParams:
    """Loop budget and convergence threshold, overridable per call."""

    target_score: int = DEFAULT_TARGET_SCORE
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    def validate(self) -> InvalidInput | None:
        if not (1 <= self.max_iterations <= MAX_ITERATIONS_LIMIT):
            return InvalidInput(f"max_iterations must be between 1 and {MAX_ITERATIONS_LIMIT}")
        if not (0 <= self.target_score <= 100):
            return InvalidInput("target_score must be between 0 and 100")
        return None


@dataclass(frozen=True)
class HumanizeRequest:
    text: object
    current_score: DocumentScore | None = None
    tone: Tone = Tone.CASUAL
    params: HumanizationParams | None = None  # None: use the use case defaults
