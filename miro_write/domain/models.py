from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from miro_write.domain.types import Percent


class Classification(str, Enum):
    HUMAN = "Human"
    LIKELY_AI = "Likely-AI"
    AI = "AI"


class Tone(str, Enum):
    CASUAL = "casual"
    PROFESSIONAL = "professional"
    PRESERVE = "preserve"


class LoopStatus(str, Enum):
    CONVERGED = "converged"
    BUDGET_EXHAUSTED = "budget_exhausted"


@dataclass(frozen=True)
class TextUnit:
    """One sentence-granularity span of the input document."""

    text: str
    index: int


DEFAULT_REASONING = "Unable to classify"


@dataclass(frozen=True)
class SentenceVerdict:
    text: str
    classification: Classification
    confidence: float
    reasoning: str = ""

    def __post_init__(self) -> None:
        if not (0.0 <= self.confidence <= 1.0):
            raise ValueError("confidence must be between 0 and 1")

    @classmethod
    def default(cls, text: str) -> SentenceVerdict:
        return cls(
            text=text,
            classification=Classification.LIKELY_AI,
            confidence=0.5,
            reasoning=DEFAULT_REASONING,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "classification": self.classification.value,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class DocumentScore:
    """Document-level percentages; always sum to exactly 100."""

    ai_written: Percent
    ai_refined: Percent
    human_written: Percent

    def __post_init__(self) -> None:
        parts = (self.ai_written, self.ai_refined, self.human_written)
        if any(p < 0 for p in parts):
            raise ValueError("scores must be non-negative")
        if sum(parts) != 100:
            raise ValueError(f"scores must sum to 100, got {sum(parts)}")

    @classmethod
    def normalized(cls, ai_written: float, ai_refined: float, human_written: float) -> DocumentScore:
        """Scale arbitrary non-negative buckets to 100.

        Each bucket is rounded half-up; the rounding residual goes to the
        bucket with the largest unrounded share (first one on ties).
        """
        raw = [float(ai_written), float(ai_refined), float(human_written)]
        if any(v < 0 or math.isnan(v) or math.isinf(v) for v in raw):
            raise ValueError("scores must be finite and non-negative")
        total = sum(raw)
        if total <= 0:
            raise ValueError("at least one score must be positive")

        scaled = [v * 100.0 / total for v in raw]
        rounded = [_round_half_up(v) for v in scaled]
        residual = 100 - sum(rounded)
        if residual:
            largest = max(range(3), key=lambda i: scaled[i])
            rounded[largest] += residual
        return cls(ai_written=rounded[0], ai_refined=rounded[1], human_written=rounded[2])

    def to_dict(self) -> dict[str, int]:
        return {
            "aiWritten": self.ai_written,
            "aiRefined": self.ai_refined,
            "humanWritten": self.human_written,
        }

    def describe(self) -> str:
        return (
            f"{self.ai_written}% AI-written, {self.ai_refined}% AI-refined, "
            f"{self.human_written}% human-written"
        )


@dataclass(frozen=True)
class DetectionResult:
    overall_scores: DocumentScore
    summary: str
    sentences: tuple[SentenceVerdict, ...]
    word_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "overallScores": self.overall_scores.to_dict(),
            "summary": self.summary,
            "sentences": [s.to_dict() for s in self.sentences],
            "wordCount": self.word_count,
        }


@dataclass(frozen=True)
class SessionEntry:
    text: str
    result: DetectionResult
    round: int


@dataclass(frozen=True)
class HumanizationSession:
    """Caller-held, append-only history of analysis rounds.

    The core never reads this; callers build the next entry from whatever
    the detection and humanization entrypoints returned.
    """

    entries: tuple[SessionEntry, ...] = ()

    def append(self, text: str, result: DetectionResult) -> HumanizationSession:
        entry = SessionEntry(text=text, result=result, round=len(self.entries) + 1)
        return HumanizationSession(entries=self.entries + (entry,))

    @property
    def rounds(self) -> int:
        return len(self.entries)

    @property
    def latest(self) -> SessionEntry | None:
        return self.entries[-1] if self.entries else None

    @property
    def original_text(self) -> str | None:
        return self.entries[0].text if self.entries else None


@dataclass
class IterationState:
    """Mutable loop state; lives for one humanization invocation."""

    current_text: str
    current_score: DocumentScore | None
    tone: Tone
    target_score: int
    max_iterations: int
    iteration: int = 0
    last_score: DocumentScore | None = field(default=None)


@dataclass(frozen=True)
class HumanizationOutcome:
    text: str
    status: LoopStatus
    iterations: int
    last_score: DocumentScore | None = None
    pre_pass_applied: bool = False

    @property
    def converged(self) -> bool:
        return self.status is LoopStatus.CONVERGED
