from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DetectRequest:
    """
    DTO for the sentence-level detection entrypoint.
    `text` is raw user input; validation happens in the use case.
    """

    text: object


@dataclass(frozen=True)
class ScoreRequest:
    """DTO for the single-shot document score."""

    text: object
