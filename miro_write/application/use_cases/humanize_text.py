"""Iterative humanization loop.

Why: Rewrite, rescore, decide. Rate and quota limits stop the loop at once;
     scoring noise (unparseable or unavailable rescoring) only means "not
     there yet" and never burns the caller's result.

States: Init -> Rewriting -> Rescoring -> (Converged | BudgetExhausted | Failed)
"""

from __future__ import annotations

import logging

from miro_write.application.dto.humanize_dto import HumanizationParams, HumanizeRequest
from miro_write.application.ports.bulk_humanizer_port import BulkHumanizerPort
from miro_write.application.ports.oracle_port import OraclePort
from miro_write.application.ports.telemetry_port import NullTelemetry, TelemetryPort
from miro_write.application.prompts import build_rewrite_messages
from miro_write.application.use_cases.score_document import ScoreDocument
from miro_write.domain.errors import DomainError, OracleError, OracleUnavailable, is_fatal
from miro_write.domain.models import HumanizationOutcome, IterationState, LoopStatus
from miro_write.domain.services.segmentation import (
    DEFAULT_MAX_TEXT_LENGTH,
    sanitize_text,
    validate_text,
)
from miro_write.domain.types import Result

logger = logging.getLogger(__name__)


class HumanizeText:
    def __init__(
        self,
        rewriter: OraclePort,
        scorer: ScoreDocument,
        bulk_humanizer: BulkHumanizerPort | None = None,
        params: HumanizationParams | None = None,
        rewrite_temperature: float | None = None,
        max_text_length: int = DEFAULT_MAX_TEXT_LENGTH,
        telemetry: TelemetryPort | None = None,
    ) -> None:
        self.rewriter = rewriter
        self.scorer = scorer
        self.bulk_humanizer = bulk_humanizer
        self.params = params or HumanizationParams()
        self.rewrite_temperature = rewrite_temperature
        self.max_text_length = max_text_length
        self.telemetry = telemetry or NullTelemetry()

    def execute(self, req: HumanizeRequest) -> Result[HumanizationOutcome, DomainError]:
        params = req.params or self.params
        invalid = params.validate()
        if invalid is not None:
            return Result.failure(invalid)

        checked = validate_text(req.text, self.max_text_length)
        if not checked.ok:
            assert checked.error is not None
            return Result.failure(checked.error)
        assert checked.value is not None

        # Init
        text, pre_pass_applied = self._pre_pass(checked.value)
        state = IterationState(
            current_text=text,
            current_score=req.current_score,
            tone=req.tone,
            target_score=params.target_score,
            max_iterations=params.max_iterations,
        )

        while True:
            # Rewriting
            round_no = state.iteration + 1
            r_text = self._rewrite(state, round_no)
            if not r_text.ok:
                assert r_text.error is not None
                logger.error("humanization failed in round %d: %s", round_no, r_text.error)
                self.telemetry.incr(
                    "miro.humanize.outcomes",
                    {"status": "failed", "error_type": type(r_text.error).__name__},
                )
                return Result.failure(r_text.error)
            assert r_text.value is not None
            state.current_text = r_text.value
            state.iteration = round_no
            self.telemetry.incr("miro.humanize.iterations", {"tone": state.tone.value})

            # Rescoring
            r_score = self.scorer.score(state.current_text)
            if not r_score.ok:
                if is_fatal(r_score.error):
                    assert r_score.error is not None
                    logger.error("rescoring hit %s in round %d", type(r_score.error).__name__, round_no)
                    self.telemetry.incr(
                        "miro.humanize.outcomes",
                        {"status": "failed", "error_type": type(r_score.error).__name__},
                    )
                    return Result.failure(r_score.error)
                logger.warning(
                    "round %d/%d rescoring inconclusive: %s",
                    round_no,
                    state.max_iterations,
                    type(r_score.error).__name__,
                )
                state.last_score = None
            else:
                assert r_score.value is not None
                state.current_score = r_score.value
                state.last_score = r_score.value
                logger.info(
                    "round %d/%d score: %d%% human",
                    round_no,
                    state.max_iterations,
                    r_score.value.human_written,
                )
                if r_score.value.human_written >= state.target_score:
                    return Result.success(self._finish(state, LoopStatus.CONVERGED, pre_pass_applied))

            # Decision
            if state.iteration >= state.max_iterations:
                return Result.success(
                    self._finish(state, LoopStatus.BUDGET_EXHAUSTED, pre_pass_applied)
                )

    def close(self) -> None:
        """Release the bulk humanizer's HTTP client, if one is wired."""
        if self.bulk_humanizer is not None:
            self.bulk_humanizer.close()

    def _pre_pass(self, text: str) -> tuple[str, bool]:
        if self.bulk_humanizer is None:
            return text, False
        r = self.bulk_humanizer.humanize(text)
        if not r.ok:
            logger.warning("bulk humanizer pre-pass skipped: %s", r.error)
            return text, False
        rewritten = sanitize_text(r.value or "").strip()
        if not rewritten:
            logger.warning("bulk humanizer returned empty text, keeping original")
            return text, False
        logger.info("bulk humanizer pre-pass applied")
        return rewritten, True

    def _rewrite(self, state: IterationState, round_no: int) -> Result[str, OracleError]:
        messages = build_rewrite_messages(
            state.current_text,
            tone=state.tone,
            current_score=state.current_score,
            iteration=round_no,
            max_iterations=state.max_iterations,
            target_score=state.target_score,
        )
        r = self.rewriter.complete(messages, temperature=self.rewrite_temperature)
        if not r.ok:
            assert r.error is not None
            if is_fatal(r.error) or isinstance(r.error, OracleUnavailable):
                return Result.failure(r.error)
            return Result.failure(OracleUnavailable(str(r.error)))

        rewritten = sanitize_text(r.value or "").strip()
        if not rewritten:
            return Result.failure(OracleUnavailable("Rewrite oracle returned an empty response"))
        return Result.success(rewritten)

    def _finish(self, state: IterationState, status: LoopStatus, pre_pass_applied: bool) -> HumanizationOutcome:
        logger.info("humanization %s after %d round(s)", status.value, state.iteration)
        self.telemetry.incr("miro.humanize.outcomes", {"status": status.value})
        return HumanizationOutcome(
            text=state.current_text,
            status=status,
            iterations=state.iteration,
            last_score=state.last_score,
            pre_pass_applied=pre_pass_applied,
        )
