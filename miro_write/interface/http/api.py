"""HTTP API for detection and humanization.

Why: Consumable API without business logic; pure delegation to use cases.
"""

import logging
from typing import Any

try:
    from fastapi import FastAPI, Request
    from fastapi.exceptions import RequestValidationError
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel, Field
except ImportError as err:
    raise ImportError(
        "FastAPI not installed. Install with: pip install 'miro-write[http]'"
    ) from err

from miro_write.application.dto.detection_dto import DetectRequest, ScoreRequest
from miro_write.application.dto.humanize_dto import (
    MAX_ITERATIONS_LIMIT,
    HumanizationParams,
    HumanizeRequest,
)
from miro_write.domain.errors import DomainError, InvalidInput, QuotaExhausted, RateLimited
from miro_write.domain.models import DocumentScore, Tone

logger = logging.getLogger(__name__)


class ScoreModel(BaseModel):
    aiWritten: float = Field(ge=0)
    aiRefined: float = Field(ge=0)
    humanWritten: float = Field(ge=0)


class DetectRequestModel(BaseModel):
    """Request model for /v1/detect and /v1/score; text is validated by the use case."""

    text: Any = None


class HumanizeRequestModel(BaseModel):
    """Request model for /v1/humanize endpoint."""

    text: Any = None
    currentScore: ScoreModel | None = None
    tone: Tone = Tone.CASUAL
    targetScore: int | None = Field(default=None, ge=0, le=100)
    maxIterations: int | None = Field(default=None, ge=1, le=MAX_ITERATIONS_LIMIT)


class HumanizeResponseModel(BaseModel):
    humanizedText: str
    status: str
    iterations: int


# Global state (use cases are built lazily from the environment)
app = FastAPI(title="Miro Write API", version="1.0.0")
use_cases: dict[str, Any] = {}


def _use_case(name: str) -> Any:
    if name not in use_cases:
        from miro_write.config import composition
        from miro_write.config.settings import AppSettings

        settings = AppSettings()
        builders = {
            "detect": lambda: composition.build_detect_use_case(settings),
            "humanize": lambda: composition.build_humanize_use_case(settings),
            "score": lambda: composition.build_score_document_use_case(settings),
        }
        use_cases[name] = builders[name]()
    return use_cases[name]


def error_response(error: BaseException | None) -> JSONResponse:
    """Map a domain error to a status code and one human-readable message."""
    if isinstance(error, InvalidInput):
        status = 400
    elif isinstance(error, RateLimited):
        status = 429
    elif isinstance(error, QuotaExhausted):
        status = 402
    else:
        status = 500
    message = str(error) if isinstance(error, DomainError) else "Internal server error"
    return JSONResponse(status_code=status, content={"error": message})


@app.on_event("startup")
async def startup_event() -> None:
    from miro_write.config.logging import configure_logging
    from miro_write.config.settings import AppSettings

    configure_logging(AppSettings().log_level)


@app.on_event("shutdown")
async def shutdown_event() -> None:
    humanize_uc = use_cases.get("humanize")
    if humanize_uc is not None:
        humanize_uc.close()


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies get the same 400 shape as InvalidInput."""
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
        problems.append(f"{field}: {err.get('msg', 'invalid value')}")
    return error_response(InvalidInput("Invalid request: " + "; ".join(problems)))


@app.post("/v1/detect", response_model=None)
def detect(req: DetectRequestModel) -> Any:
    """Sentence-level detection.

    Example:
        POST /v1/detect
        {"text": "Furthermore, the results are significant. I loved it!"}
    """
    try:
        result = _use_case("detect").execute(DetectRequest(text=req.text))
    except Exception:
        logger.exception("detect endpoint crashed")
        return error_response(None)

    if not result.ok:
        return error_response(result.error)
    return result.value.to_dict()


@app.post("/v1/score", response_model=None)
def score(req: DetectRequestModel) -> Any:
    """Single-shot document score (no sentence breakdown)."""
    try:
        result = _use_case("score").execute(ScoreRequest(text=req.text))
    except Exception:
        logger.exception("score endpoint crashed")
        return error_response(None)

    if not result.ok:
        return error_response(result.error)
    return result.value.to_dict()


@app.post("/v1/humanize", response_model=None)
def humanize(req: HumanizeRequestModel) -> Any:
    """Iterative humanization.

    Example:
        POST /v1/humanize
        {
            "text": "Moreover, it is important to note that...",
            "currentScore": {"aiWritten": 70, "aiRefined": 20, "humanWritten": 10},
            "tone": "casual"
        }
    """
    current: DocumentScore | None = None
    if req.currentScore is not None:
        try:
            current = DocumentScore.normalized(
                req.currentScore.aiWritten,
                req.currentScore.aiRefined,
                req.currentScore.humanWritten,
            )
        except ValueError:
            return error_response(InvalidInput("currentScore must contain a positive value"))

    params = None
    if req.targetScore is not None or req.maxIterations is not None:
        uc_defaults = _use_case("humanize").params
        params = HumanizationParams(
            target_score=req.targetScore if req.targetScore is not None else uc_defaults.target_score,
            max_iterations=(
                req.maxIterations if req.maxIterations is not None else uc_defaults.max_iterations
            ),
        )

    try:
        result = _use_case("humanize").execute(
            HumanizeRequest(text=req.text, current_score=current, tone=req.tone, params=params)
        )
    except Exception:
        logger.exception("humanize endpoint crashed")
        return error_response(None)

    if not result.ok:
        return error_response(result.error)
    outcome = result.value
    return HumanizeResponseModel(
        humanizedText=outcome.text,
        status=outcome.status.value,
        iterations=outcome.iterations,
    )


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy", "service": "miro-write"}
