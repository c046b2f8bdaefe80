"""
Triage Controllers (API Routes)
================================

FastAPI routes for image analysis.

Controllers are thin - they check the shared secret and delegate to the
analysis service.
"""

import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from emotriage.config import Settings, get_settings
from emotriage.core import ConfigurationException, UnauthorizedException
from emotriage.shared.infrastructure.logging import get_logger
from emotriage.triage.application import AnalysisService, AnalyzeRequest, AnalyzeResponse, ErrorResponse

logger = get_logger(__name__)
router = APIRouter(tags=["Triage"])


# ========== Example payloads for Swagger ==========

ANALYZE_REQUEST_EXAMPLE = {
    "key": "uploads/2024-01-15/3f6c2a9e-1b7d-4c1e-9a55-8d0f4b2e7c11.png",
    "textContext": "Checkout is broken and customers are furious"
}

ANALYZE_RESPONSE_EXAMPLE = {
    "ok": True,
    "priority": "P0",
    "emotion": {"label": "angry", "score": 0.912, "signal": "frustration"},
    "rationale": "Used text context keywords. Detected high-frustration emotion signal.",
    "nextStep": "Treat as incident: page on-call, confirm scope, start comms if widespread.",
    "timingsMs": {"total": 1430, "s3Get": 85, "hfCall": 1338, "rules": 0},
    "meta": {"model": "trpakov/vit-face-expression", "receivedTextContext": True}
}


# ========== Dependencies ==========

def verify_shared_secret(
    x_shared_secret: Optional[str] = Header(None, alias="X-Shared-Secret"),
    settings: Settings = Depends(get_settings)
) -> None:
    """Reject requests whose X-Shared-Secret header does not match the configured secret."""
    expected = settings.shared_secret
    if not x_shared_secret or not expected:
        raise UnauthorizedException()
    if not hmac.compare_digest(x_shared_secret.encode(), expected.encode()):
        raise UnauthorizedException()


def get_analysis_service(request: Request) -> AnalysisService:
    """Get analysis service from app state."""
    service = getattr(request.app.state, "analysis_service", None)
    if service is None:
        raise ConfigurationException("Analysis service not available")
    return service


async def parse_analyze_request(request: Request) -> AnalyzeRequest:
    """
    Decode the request body after the secret check has passed.

    An empty body counts as ``{}``. Undecodable or mistyped bodies raise
    RequestValidationError, rendered as BAD_REQUEST.
    """
    body = await request.body()
    try:
        return AnalyzeRequest.model_validate_json(body or b"{}")
    except ValidationError as e:
        raise RequestValidationError(e.errors())


# ========== Route Handlers ==========

@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    dependencies=[Depends(verify_shared_secret)],
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": AnalyzeRequest.model_json_schema(by_alias=True),
                    "example": ANALYZE_REQUEST_EXAMPLE
                }
            }
        }
    },
    summary="Triage an uploaded image",
    description="""
    Classify the emotion in a previously uploaded image and derive a support
    ticket priority.

    The request must carry the `X-Shared-Secret` header. It is checked
    before the body is read.

    **Priority rules**:
    - Text keywords set the base tier (`P0` incident words, `P1` defect words,
      otherwise `P2`)
    - A confident frustration signal escalates `P2` → `P1`, and `P1` → `P0`
      when the text mentions checkout, payment, login, 500 or down
    - Emotion never lowers a priority

    **Example Request**:
    ```json
    {
        "key": "uploads/2024-01-15/<uuid>.png",
        "textContext": "Checkout is broken and customers are furious"
    }
    ```
    """,
    responses={
        200: {
            "description": "Image triaged",
            "content": {"application/json": {"example": ANALYZE_RESPONSE_EXAMPLE}}
        },
        400: {"model": ErrorResponse, "description": "Missing key or malformed body"},
        401: {"model": ErrorResponse, "description": "Missing or invalid secret"},
        404: {"model": ErrorResponse, "description": "Image key not found"},
        502: {"model": ErrorResponse, "description": "Emotion classifier call failed"},
    }
)
async def analyze_image(
    request: Request,
    service: AnalysisService = Depends(get_analysis_service)
) -> AnalyzeResponse:
    payload = await parse_analyze_request(request)
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    logger.info(
        "Analyzing image",
        extra={
            "correlation_id": correlation_id,
            "has_key": bool(payload.key),
            "has_text_context": bool(payload.text_context)
        }
    )

    result = await service.analyze(payload.key, payload.text_context)

    return AnalyzeResponse.from_result(result, service.model_id, payload.text_context)


# Export router for inclusion in main app
triage_router = router
