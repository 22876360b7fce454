"""CLI for detection and humanization (thin: parse args, format output)."""

from __future__ import annotations

import argparse
import sys

from miro_write.application.dto.detection_dto import DetectRequest, ScoreRequest
from miro_write.application.dto.humanize_dto import HumanizationParams, HumanizeRequest
from miro_write.application.use_cases.detect_ai_text import DetectAIText
from miro_write.application.use_cases.humanize_text import HumanizeText
from miro_write.config.composition import (
    build_detect_use_case,
    build_humanize_use_case,
    build_score_document_use_case,
)
from miro_write.config.logging import configure_logging
from miro_write.domain.models import DetectionResult, DocumentScore, HumanizationSession, Tone


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="miro-write", description="AI authorship detection and humanization")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_input(p: argparse.ArgumentParser) -> None:
        group = p.add_mutually_exclusive_group()
        group.add_argument("--text", help="Text to process")
        group.add_argument("--file", help="Read text from a UTF-8 file ('-' for stdin)")

    add_input(sub.add_parser("detect", help="Sentence-level AI detection"))
    add_input(sub.add_parser("score", help="Single-shot document score"))

    hum = sub.add_parser("humanize", help="Rewrite until the text scores as human")
    add_input(hum)
    hum.add_argument("--tone", choices=[t.value for t in Tone], default=Tone.CASUAL.value)
    hum.add_argument("--target", type=int, default=None, help="Target human score (0-100)")
    hum.add_argument("--max-iterations", type=int, default=None, help="Rewrite rounds per call")
    hum.add_argument("--rounds", type=int, default=1, help="Humanize + re-detect rounds")
    return parser


def _read_input(args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    if args.file and args.file != "-":
        with open(args.file, encoding="utf-8") as fh:
            return fh.read()
    return sys.stdin.read()


def _print_error(err: BaseException | None) -> int:
    err_name = type(err).__name__
    err_msg = getattr(err, "message", str(err))
    print(f"\n[ERROR] {err_name}: {err_msg}")
    return 1


def _print_scores(scores: DocumentScore) -> None:
    print(f"AI Written:    {scores.ai_written}%")
    print(f"AI Refined:    {scores.ai_refined}%")
    print(f"Human Written: {scores.human_written}%")


def _print_detection(result: DetectionResult) -> None:
    print("\n" + "=" * 80)
    print("DETECTION:")
    print("=" * 80)
    _print_scores(result.overall_scores)
    print(f"Summary: {result.summary}")
    print(f"{result.word_count} words, {len(result.sentences)} sentences")
    print("\n" + "=" * 80)
    print("SENTENCES:")
    print("=" * 80)
    for i, s in enumerate(result.sentences, 1):
        print(f"{i}. [{s.classification.value}] ({s.confidence * 100:.0f}% confidence) - {s.reasoning}")
        print(f'   "{s.text}"')


def _detect(args: argparse.Namespace) -> int:
    result = build_detect_use_case().execute(DetectRequest(text=_read_input(args)))
    if not result.ok or result.value is None:
        return _print_error(result.error)
    _print_detection(result.value)
    return 0


def _score(args: argparse.Namespace) -> int:
    result = build_score_document_use_case().execute(ScoreRequest(text=_read_input(args)))
    if not result.ok or result.value is None:
        return _print_error(result.error)
    _print_scores(result.value)
    return 0


def _humanize(args: argparse.Namespace) -> int:
    humanize_uc = build_humanize_use_case()
    try:
        return _run_rounds(args, build_detect_use_case(), humanize_uc)
    finally:
        humanize_uc.close()


def _run_rounds(args: argparse.Namespace, detect_uc: DetectAIText, humanize_uc: HumanizeText) -> int:
    params = None
    if args.target is not None or args.max_iterations is not None:
        params = HumanizationParams(
            target_score=args.target if args.target is not None else humanize_uc.params.target_score,
            max_iterations=(
                args.max_iterations
                if args.max_iterations is not None
                else humanize_uc.params.max_iterations
            ),
        )

    text = _read_input(args)
    first = detect_uc.execute(DetectRequest(text=text))
    if not first.ok or first.value is None:
        return _print_error(first.error)
    session = HumanizationSession().append(text, first.value)

    for _ in range(max(1, args.rounds)):
        latest = session.latest
        assert latest is not None
        outcome = humanize_uc.execute(
            HumanizeRequest(
                text=latest.text,
                current_score=latest.result.overall_scores,
                tone=Tone(args.tone),
                params=params,
            )
        )
        if not outcome.ok or outcome.value is None:
            return _print_error(outcome.error)
        redetected = detect_uc.execute(DetectRequest(text=outcome.value.text))
        if not redetected.ok or redetected.value is None:
            return _print_error(redetected.error)
        session = session.append(outcome.value.text, redetected.value)
        print(
            f"Round {session.rounds}: {redetected.value.overall_scores.human_written}% human "
            f"({outcome.value.status.value} after {outcome.value.iterations} rewrite(s))"
        )

    final = session.latest
    assert final is not None
    print("\n" + "=" * 80)
    print("HUMANIZED TEXT:")
    print("=" * 80)
    print(final.text)
    _print_detection(final.result)
    print(f"\nTotal rounds: {session.rounds}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)
    handlers = {"detect": _detect, "score": _score, "humanize": _humanize}
    try:
        return handlers[args.command](args)
    except OSError as ex:
        return _print_error(ex)


if __name__ == "__main__":
    sys.exit(main())
