"""
Inference Client Infrastructure
================================

HTTP client for the Hugging Face inference router.

The image bytes are posted as-is with their stored content type; the router
answers with a list of ``{"label": ..., "score": ...}`` predictions.
Single attempt, no retries.
"""

from typing import Any, Optional

import httpx

from emotriage.config import settings
from emotriage.core import ClassifierException
from emotriage.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class HuggingFaceInferenceClient:
    """
    Async client for image classification on the Hugging Face router.

    Reuses one ``httpx.AsyncClient`` for connection pooling; pass your own
    client (e.g. with a mock transport) to control transport behaviour.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self._token = token if token is not None else settings.hf_token
        self._model = (model if model is not None else settings.hf_model).strip()
        self._base_url = (base_url or settings.hf_base_url).rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=timeout or settings.hf_timeout_seconds
        )

        if not self._token:
            logger.warning("Hugging Face token not configured - inference calls will be unauthenticated")
        if not self._model:
            logger.warning("Hugging Face model not configured")

    @property
    def model(self) -> str:
        return self._model

    @property
    def model_url(self) -> str:
        return f"{self._base_url}/{self._model}"

    async def classify_image(self, image: bytes, content_type: str) -> Any:
        """
        Classify an image.

        Args:
            image: Raw image bytes
            content_type: MIME type sent as the request Content-Type

        Returns:
            Parsed JSON body (normally a list of label/score dicts)

        Raises:
            ClassifierException: Transport error, non-2xx status or non-JSON body
        """
        headers = {
            "Content-Type": content_type,
            "Accept": "application/json",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            response = await self._http.post(self.model_url, content=image, headers=headers)
        except httpx.HTTPError as e:
            logger.error(
                "HF request failed",
                extra={"url": self.model_url, "error_type": type(e).__name__, "error": str(e)}
            )
            raise ClassifierException(f"HF request failed: {type(e).__name__}") from e

        if response.is_error:
            logger.error(
                "HF inference failed",
                extra={
                    "status_code": response.status_code,
                    "url": self.model_url,
                    "content_type": content_type,
                    "body": response.text[:300]
                }
            )
            raise ClassifierException(
                f"HF failed: {response.status_code}",
                status=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise ClassifierException(
                "HF returned a non-JSON body",
                status=response.status_code
            ) from e

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()
