from __future__ import annotations

import re
from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from miro_write.domain.models import Classification, DocumentScore, SentenceVerdict

FALLBACK_SUMMARY = "Analysis completed using sentence-level classification."

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_LABEL_NORMALIZE_RE = re.compile(r"[^a-z0-9]+")

_LABELS: dict[str, Classification] = {
    "human": Classification.HUMAN,
    "human_written": Classification.HUMAN,
    "humanwritten": Classification.HUMAN,
    "likely_ai": Classification.LIKELY_AI,
    "likelyai": Classification.LIKELY_AI,
    "ai_refined": Classification.LIKELY_AI,
    "airefined": Classification.LIKELY_AI,
    "mixed": Classification.LIKELY_AI,
    "ai": Classification.AI,
    "ai_generated": Classification.AI,
    "ai_written": Classification.AI,
    "aiwritten": Classification.AI,
}

_SCORE_KEYS = (
    ("aiWritten", "ai_written"),
    ("aiRefined", "ai_refined"),
    ("humanWritten", "human_written"),
)


def normalize_label(value: str) -> str:
    return _LABEL_NORMALIZE_RE.sub("_", value.strip().lower()).strip("_")


def coerce_classification(value: Any) -> Classification | None:
    if isinstance(value, Classification):
        return value
    if not isinstance(value, str):
        return None
    return _LABELS.get(normalize_label(value))


def coerce_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _NUMBER_RE.search(value.strip())
        return float(match.group(0)) if match else None
    return None


def coerce_confidence(value: Any, default: float = 0.5) -> float:
    numeric = coerce_number(value)
    if numeric is None:
        return default
    if 1.0 < numeric <= 100.0:
        numeric /= 100.0
    return max(0.0, min(1.0, numeric))


def verdict_from_entry(text: str, entry: Any) -> SentenceVerdict:
    """Turn one oracle array entry into a verdict, or the default verdict."""
    if not isinstance(entry, Mapping):
        return SentenceVerdict.default(text)
    classification = coerce_classification(entry.get("classification"))
    if classification is None:
        return SentenceVerdict.default(text)
    reasoning = entry.get("reasoning")
    return SentenceVerdict(
        text=text,
        classification=classification,
        confidence=coerce_confidence(entry.get("confidence")),
        reasoning=reasoning.strip() if isinstance(reasoning, str) else "",
    )


def document_score_from_mapping(payload: Mapping[str, Any]) -> DocumentScore | None:
    """Read the three buckets from an oracle object; None if unusable."""
    values: list[float] = []
    for camel, snake in _SCORE_KEYS:
        raw = payload.get(camel, payload.get(snake))
        number = coerce_number(raw)
        if number is None or number < 0:
            return None
        values.append(number)
    try:
        return DocumentScore.normalized(*values)
    except ValueError:
        return None


def fallback_document_score(verdicts: Sequence[SentenceVerdict]) -> DocumentScore:
    """Percentages from raw classification counts; always sums to 100."""
    if not verdicts:
        raise ValueError("fallback needs at least one verdict")
    counts = Counter(v.classification for v in verdicts)
    return DocumentScore.normalized(
        counts[Classification.AI],
        counts[Classification.LIKELY_AI],
        counts[Classification.HUMAN],
    )
