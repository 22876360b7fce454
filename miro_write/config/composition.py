"""Composition root: builds adapters and wires them into use cases."""

from miro_write.application.dto.humanize_dto import HumanizationParams
from miro_write.application.ports.bulk_humanizer_port import BulkHumanizerPort
from miro_write.application.ports.oracle_port import OraclePort
from miro_write.application.ports.telemetry_port import NullTelemetry, TelemetryPort
from miro_write.application.services.oracle_client import OracleClient
from miro_write.application.use_cases.classify_sentences import ClassifySentences
from miro_write.application.use_cases.detect_ai_text import DetectAIText
from miro_write.application.use_cases.humanize_text import HumanizeText
from miro_write.application.use_cases.score_document import ScoreDocument
from miro_write.application.use_cases.synthesize_scores import SynthesizeScores
from miro_write.config.settings import AppSettings
from miro_write.infrastructure.humanizer.http_bulk_humanizer import HttpBulkHumanizerAdapter
from miro_write.infrastructure.llm.openai_oracle_adapter import OpenAIOracleAdapter


def build_oracle(settings: AppSettings, model: str, temperature: float) -> OraclePort:
    return OpenAIOracleAdapter(
        base_url=settings.oracle_base_url,
        api_key=settings.oracle_api_key,
        model=model,
        temperature=temperature,
        max_tokens=settings.oracle_max_tokens,
        timeout_s=settings.oracle_timeout_s,
    )


def build_bulk_humanizer(settings: AppSettings) -> BulkHumanizerPort | None:
    """Pre-pass rewriter; only wired when an API key is configured."""
    if not settings.bulk_humanizer_api_key:
        return None
    return HttpBulkHumanizerAdapter(
        url=settings.bulk_humanizer_url,
        api_key=settings.bulk_humanizer_api_key,
        mode=settings.bulk_humanizer_mode,
        timeout_s=settings.bulk_humanizer_timeout_s,
    )


def build_telemetry(settings: AppSettings) -> TelemetryPort:
    """OpenTelemetry adapter when enabled, otherwise a null sink.

    Gracefully degrades to no-ops if opentelemetry-sdk is not installed.
    """
    if not settings.telemetry_enabled:
        return NullTelemetry()

    from miro_write.infrastructure.telemetry.otel_adapter import OpenTelemetryAdapter, OtelConfig

    cfg = OtelConfig(
        service_name="miro-write",
        otlp_endpoint=settings.otlp_endpoint or None,
        environment=settings.telemetry_environment,
        enable_console=False,
    )
    return OpenTelemetryAdapter(cfg)


def build_score_document_use_case(
    settings: AppSettings | None = None,
    telemetry: TelemetryPort | None = None,
    compact_prompt: bool = False,
) -> ScoreDocument:
    """Single-shot document scorer.

    compact_prompt=True gives the cheaper rescoring variant used inside the
    humanization loop; the full variant backs the standalone score entrypoint.
    """
    settings = settings or AppSettings()
    if compact_prompt:
        oracle = build_oracle(settings, settings.rescoring_model, settings.rescoring_temperature)
        name = "rescoring"
    else:
        oracle = build_oracle(settings, settings.detection_model, settings.detection_temperature)
        name = "detection"
    return ScoreDocument(
        client=OracleClient(oracle, telemetry=telemetry, name=name),
        compact_prompt=compact_prompt,
        max_text_length=settings.max_text_length,
    )


def build_detect_use_case(
    settings: AppSettings | None = None, telemetry: TelemetryPort | None = None
) -> DetectAIText:
    settings = settings or AppSettings()
    telemetry = telemetry or build_telemetry(settings)
    oracle = build_oracle(settings, settings.detection_model, settings.detection_temperature)
    client = OracleClient(oracle, telemetry=telemetry, name="detection")
    return DetectAIText(
        classifier=ClassifySentences(client, batch_size=settings.classify_batch_size, telemetry=telemetry),
        synthesizer=SynthesizeScores(client, telemetry=telemetry),
        max_text_length=settings.max_text_length,
        telemetry=telemetry,
    )


def build_humanize_use_case(
    settings: AppSettings | None = None, telemetry: TelemetryPort | None = None
) -> HumanizeText:
    settings = settings or AppSettings()
    telemetry = telemetry or build_telemetry(settings)
    return HumanizeText(
        rewriter=build_oracle(settings, settings.rewrite_model, settings.rewrite_temperature),
        scorer=build_score_document_use_case(settings, telemetry=telemetry, compact_prompt=True),
        bulk_humanizer=build_bulk_humanizer(settings),
        params=HumanizationParams(
            target_score=settings.humanize_target_score,
            max_iterations=settings.humanize_max_iterations,
        ),
        rewrite_temperature=settings.rewrite_temperature,
        max_text_length=settings.max_text_length,
        telemetry=telemetry,
    )
