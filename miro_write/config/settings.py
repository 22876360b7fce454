"""Application settings with environment-driven configuration.

Why: Single place that reads the environment; everything else receives
     settings through the composition root.
"""

import os
from dataclasses import dataclass, field


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


@dataclass(frozen=True)
class AppSettings:
    """Application settings loaded from environment variables.

    This is the ONLY place where environment variables are read.
    All other layers receive settings via dependency injection.
    """

    # ===== Oracle (OpenAI-compatible gateway) =====
    oracle_base_url: str = field(
        default_factory=lambda: os.getenv("ORACLE_BASE_URL", "https://ai.gateway.lovable.dev/v1")
    )
    oracle_api_key: str = field(default_factory=lambda: os.getenv("ORACLE_API_KEY", ""))
    oracle_timeout_s: float | None = field(default_factory=lambda: _optional_float("ORACLE_TIMEOUT_S"))
    # Unset = no client-side deadline

    oracle_max_tokens: int = field(
        default_factory=lambda: int(os.getenv("ORACLE_MAX_TOKENS", "4096"))
    )

    detection_model: str = field(
        default_factory=lambda: os.getenv("DETECTION_MODEL", "google/gemini-2.5-pro")
    )
    rescoring_model: str = field(
        default_factory=lambda: os.getenv("RESCORING_MODEL", "google/gemini-2.5-flash")
    )
    rewrite_model: str = field(
        default_factory=lambda: os.getenv("REWRITE_MODEL", "google/gemini-2.5-flash")
    )
    detection_temperature: float = field(
        default_factory=lambda: float(os.getenv("DETECTION_TEMPERATURE", "0.1"))
    )
    rescoring_temperature: float = field(
        default_factory=lambda: float(os.getenv("RESCORING_TEMPERATURE", "0.2"))
    )
    rewrite_temperature: float = field(
        default_factory=lambda: float(os.getenv("REWRITE_TEMPERATURE", "0.9"))
    )

    # ===== Bulk humanizer pre-pass (optional) =====
    bulk_humanizer_url: str = field(
        default_factory=lambda: os.getenv("BULK_HUMANIZER_URL", "https://humanizeai.pro/api/humanize")
    )
    bulk_humanizer_api_key: str = field(
        default_factory=lambda: os.getenv("BULK_HUMANIZER_API_KEY", "")
    )
    # Empty key = pre-pass disabled

    bulk_humanizer_mode: str = field(
        default_factory=lambda: os.getenv("BULK_HUMANIZER_MODE", "ultra")
    )
    bulk_humanizer_timeout_s: float | None = field(
        default_factory=lambda: _optional_float("BULK_HUMANIZER_TIMEOUT_S")
    )

    # ===== Detection / humanization limits =====
    max_text_length: int = field(
        default_factory=lambda: int(os.getenv("MAX_TEXT_LENGTH", "50000"))
    )
    classify_batch_size: int = field(
        default_factory=lambda: int(os.getenv("CLASSIFY_BATCH_SIZE", "10"))
    )
    humanize_target_score: int = field(
        default_factory=lambda: int(os.getenv("HUMANIZE_TARGET_SCORE", "80"))
    )
    humanize_max_iterations: int = field(
        default_factory=lambda: int(os.getenv("HUMANIZE_MAX_ITERATIONS", "3"))
    )

    # ===== Telemetry / logging =====
    telemetry_enabled: bool = field(
        default_factory=lambda: os.getenv("TELEMETRY_ENABLED", "false").lower() == "true"
    )
    otlp_endpoint: str = field(default_factory=lambda: os.getenv("OTLP_ENDPOINT", ""))
    telemetry_environment: str = field(
        default_factory=lambda: os.getenv("TELEMETRY_ENVIRONMENT", "production")
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
