"""Upload infrastructure adapters."""

from emotriage.uploads.infrastructure.external import S3UploadSignerAdapter

__all__ = ["S3UploadSignerAdapter"]
