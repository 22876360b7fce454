from __future__ import annotations

from miro_write.application.dto.detection_dto import ScoreRequest
from miro_write.application.prompts import build_detection_messages, build_rescoring_messages
from miro_write.application.services.oracle_client import OracleClient
from miro_write.domain.errors import DomainError, OracleError, OracleUnavailable, ParseFailure
from miro_write.domain.models import DocumentScore
from miro_write.domain.services.scoring import document_score_from_mapping
from miro_write.domain.services.segmentation import DEFAULT_MAX_TEXT_LENGTH, validate_text
from miro_write.domain.types import Result


class ScoreDocument:
    """Single-shot document-level detection.

    ``score`` keeps ``ParseFailure`` distinct so the humanization loop can
    treat it as inconclusive. ``execute`` is the standalone entrypoint: no
    aggregate exists to fall back on, so a parse failure becomes fatal.
    """

    def __init__(
        self,
        client: OracleClient,
        compact_prompt: bool = False,
        max_text_length: int = DEFAULT_MAX_TEXT_LENGTH,
    ) -> None:
        self.client = client
        self.compact_prompt = compact_prompt
        self.max_text_length = max_text_length

    def score(self, text: str) -> Result[DocumentScore, OracleError]:
        build = build_rescoring_messages if self.compact_prompt else build_detection_messages
        r = self.client.request_json(build(text), shape="object")
        if not r.ok:
            assert r.error is not None
            return Result.failure(r.error)

        assert isinstance(r.value, dict)
        scores = document_score_from_mapping(r.value)
        if scores is None:
            return Result.failure(
                ParseFailure("detection JSON lacks usable scores", raw_preview=str(r.value)[:180])
            )
        return Result.success(scores)

    def execute(self, req: ScoreRequest) -> Result[DocumentScore, DomainError]:
        checked = validate_text(req.text, self.max_text_length)
        if not checked.ok:
            assert checked.error is not None
            return Result.failure(checked.error)

        assert checked.value is not None
        r = self.score(checked.value)
        if not r.ok:
            if isinstance(r.error, ParseFailure):
                return Result.failure(OracleUnavailable(ParseFailure.user_message))
            assert r.error is not None
            return Result.failure(r.error)
        assert r.value is not None
        return Result.success(r.value)
