"""
Upload Application Services
============================

Issues presigned upload URLs for images.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

from emotriage.config import ContentType
from emotriage.core import InvalidContentTypeException
from emotriage.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class IUploadSigner(ABC):
    """Interface for presigned upload URL generation."""

    @abstractmethod
    async def generate_upload_url(self, key: str, content_type: str, expires_in: int) -> str:
        """Return a URL accepting a single PUT of ``content_type`` to ``key``."""


@dataclass(frozen=True)
class PresignedUpload:
    """A presigned upload slot."""
    upload_url: str
    key: str
    expires_in_sec: int
    required_headers: Dict[str, str] = field(default_factory=dict)


class UploadService:
    """
    Service for issuing image upload URLs.

    Keys look like ``uploads/2024-01-15/<uuid4>.png``.
    """

    def __init__(
        self,
        signer: IUploadSigner,
        prefix: str = "uploads",
        expires_in_sec: int = 300
    ):
        self._signer = signer
        self._prefix = prefix.strip("/")
        self._expires_in_sec = expires_in_sec

    @staticmethod
    def parse_content_type(content_type: Optional[str]) -> ContentType:
        """
        Raises:
            InvalidContentTypeException: If the type is not PNG or JPEG
        """
        try:
            return ContentType(content_type)
        except ValueError:
            raise InvalidContentTypeException(
                "Only image/png or image/jpeg allowed.",
                {"content_type": content_type}
            )

    def build_key(self, content_type: ContentType, now: Optional[datetime] = None) -> str:
        day = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%d")
        return f"{self._prefix}/{day}/{uuid.uuid4()}.{content_type.extension}"

    async def create_upload(
        self,
        content_type: Optional[str],
        now: Optional[datetime] = None
    ) -> PresignedUpload:
        """
        Create a presigned upload for an image.

        Args:
            content_type: Requested MIME type
            now: Clock override for the date partition

        Returns:
            PresignedUpload

        Raises:
            InvalidContentTypeException: Unsupported content type
            PresignException: Signing failed
        """
        parsed = self.parse_content_type(content_type)
        key = self.build_key(parsed, now)

        upload_url = await self._signer.generate_upload_url(key, parsed.value, self._expires_in_sec)

        logger.info(
            "Upload URL issued",
            extra={"key": key, "content_type": parsed.value, "expires_in_sec": self._expires_in_sec}
        )

        return PresignedUpload(
            upload_url=upload_url,
            key=key,
            expires_in_sec=self._expires_in_sec,
            required_headers={"Content-Type": parsed.value}
        )
