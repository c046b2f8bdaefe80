"""
Object Storage Infrastructure
=============================

Async wrapper around the boto3 S3 client.

boto3 is synchronous, so every call is pushed to a worker thread to keep the
event loop free.
"""

import asyncio
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from emotriage.config import settings
from emotriage.core import ConfigurationException, ObjectNotFoundException, PresignException
from emotriage.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class S3StorageClient:
    """
    S3 client bound to the upload bucket.

    Provides object reads, metadata lookups and presigned PUT URLs.
    """

    def __init__(
        self,
        bucket: Optional[str] = None,
        region: Optional[str] = None,
        client: Optional[Any] = None
    ):
        self._bucket = bucket or settings.upload_bucket
        if not self._bucket:
            raise ConfigurationException("Upload bucket not configured")

        self._client = client or boto3.client("s3", region_name=region or settings.aws_region)

    async def get_object(self, key: str) -> bytes:
        """
        Read an object body.

        Raises:
            ObjectNotFoundException: If the object is missing or unreadable
        """
        def _read() -> bytes:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            return response["Body"].read()

        try:
            return await asyncio.to_thread(_read)
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "S3 get_object failed",
                extra={"bucket": self._bucket, "key": key, "error": str(e)}
            )
            raise ObjectNotFoundException(key) from e

    async def head_object(self, key: str) -> Optional[str]:
        """Return the stored ContentType of an object (None when unset)."""
        response = await asyncio.to_thread(
            self._client.head_object, Bucket=self._bucket, Key=key
        )
        return response.get("ContentType")

    async def generate_upload_url(
        self,
        key: str,
        content_type: str,
        expires_in: int
    ) -> str:
        """
        Create a presigned PUT URL.

        ContentType is part of the signature, so the upload must send the
        same Content-Type header.

        Raises:
            PresignException: If signing fails
        """
        try:
            return await asyncio.to_thread(
                self._client.generate_presigned_url,
                "put_object",
                Params={"Bucket": self._bucket, "Key": key, "ContentType": content_type},
                ExpiresIn=expires_in
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "S3 presign failed",
                extra={"bucket": self._bucket, "key": key, "error": str(e)}
            )
            raise PresignException() from e
