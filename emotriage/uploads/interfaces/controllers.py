"""
Upload Controllers (API Routes)
===============================

FastAPI route for presigned image uploads.
"""

from fastapi import APIRouter, Depends, Request

from emotriage.core import PresignException
from emotriage.shared.infrastructure.logging import get_logger
from emotriage.triage.application import ErrorResponse
from emotriage.uploads.application import PresignRequest, PresignResponse, UploadService

logger = get_logger(__name__)
router = APIRouter(tags=["Uploads"])


PRESIGN_RESPONSE_EXAMPLE = {
    "ok": True,
    "uploadUrl": "https://emotriage-uploads.s3.amazonaws.com/uploads/2024-01-15/3f6c2a9e.png?X-Amz-Signature=...",
    "key": "uploads/2024-01-15/3f6c2a9e-1b7d-4c1e-9a55-8d0f4b2e7c11.png",
    "expiresInSec": 300,
    "requiredHeaders": {"Content-Type": "image/png"}
}


def get_upload_service(request: Request) -> UploadService:
    """Get upload service from app state."""
    service = getattr(request.app.state, "upload_service", None)
    if service is None:
        raise PresignException("Upload storage not configured.")
    return service


@router.post(
    "/presign",
    response_model=PresignResponse,
    summary="Get a presigned image upload URL",
    description="""
    Returns a short-lived URL for a single `PUT` of an image.

    Only `image/png` and `image/jpeg` are accepted. The upload must send the
    returned `requiredHeaders`, otherwise storage rejects the signature.
    """,
    responses={
        200: {
            "description": "Upload URL issued",
            "content": {"application/json": {"example": PRESIGN_RESPONSE_EXAMPLE}}
        },
        400: {"model": ErrorResponse, "description": "Unsupported content type"},
        500: {"model": ErrorResponse, "description": "Presigning failed"},
    }
)
async def presign_upload(
    request: Request,
    payload: PresignRequest,
    service: UploadService = Depends(get_upload_service)
) -> PresignResponse:
    logger.info(
        "Presign requested",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "content_type": payload.content_type
        }
    )
    upload = await service.create_upload(payload.content_type)
    return PresignResponse.from_upload(upload)


# Export router for inclusion in main app
uploads_router = router
