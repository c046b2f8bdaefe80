"""
Upload External Service Adapters
================================

S3 implementation of the upload signer.
"""

from emotriage.infrastructure.storage import S3StorageClient
from emotriage.uploads.application import IUploadSigner


class S3UploadSignerAdapter(IUploadSigner):
    """Presigns PUT requests against the S3 upload bucket."""

    def __init__(self, client: S3StorageClient):
        self._client = client

    async def generate_upload_url(self, key: str, content_type: str, expires_in: int) -> str:
        return await self._client.generate_upload_url(key, content_type, expires_in)
