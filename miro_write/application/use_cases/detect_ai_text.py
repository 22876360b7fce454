from __future__ import annotations

from miro_write.application.dto.detection_dto import DetectRequest
from miro_write.application.ports.telemetry_port import NullTelemetry, TelemetryPort
from miro_write.application.use_cases.classify_sentences import ClassifySentences
from miro_write.application.use_cases.synthesize_scores import SynthesizeScores
from miro_write.domain.errors import DomainError
from miro_write.domain.models import DetectionResult
from miro_write.domain.services.segmentation import (
    DEFAULT_MAX_TEXT_LENGTH,
    count_words,
    split_into_units,
    validate_text,
)
from miro_write.domain.types import Result


class DetectAIText:
    """
    Detection entrypoint: validate -> segment -> classify in batches -> aggregate.
    No I/O of its own; oracle access goes through the injected use cases.
    """

    def __init__(
        self,
        classifier: ClassifySentences,
        synthesizer: SynthesizeScores,
        max_text_length: int = DEFAULT_MAX_TEXT_LENGTH,
        telemetry: TelemetryPort | None = None,
    ) -> None:
        self.classifier = classifier
        self.synthesizer = synthesizer
        self.max_text_length = max_text_length
        self.telemetry = telemetry or NullTelemetry()

    def execute(self, req: DetectRequest) -> Result[DetectionResult, DomainError]:
        # 1) Validate + sanitize
        checked = validate_text(req.text, self.max_text_length)
        if not checked.ok:
            assert checked.error is not None
            return Result.failure(checked.error)
        assert checked.value is not None
        text = checked.value

        # 2) Segment
        units = split_into_units(text)
        self.telemetry.observe("miro.detect.sentences", float(len(units)))

        # 3) Classify (rate/quota failures abort, everything else degrades)
        r_verdicts = self.classifier.execute(units)
        if not r_verdicts.ok:
            assert r_verdicts.error is not None
            return Result.failure(r_verdicts.error)
        assert r_verdicts.value is not None
        verdicts = r_verdicts.value

        # 4) Aggregate
        r_synth = self.synthesizer.execute(verdicts)
        if not r_synth.ok:
            assert r_synth.error is not None
            return Result.failure(r_synth.error)
        assert r_synth.value is not None

        return Result.success(
            DetectionResult(
                overall_scores=r_synth.value.scores,
                summary=r_synth.value.summary,
                sentences=tuple(verdicts),
                word_count=count_words(text),
            )
        )
