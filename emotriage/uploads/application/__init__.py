"""
Upload Application Layer
========================

Services and DTOs for presigned image uploads.
"""

from emotriage.uploads.application.services import IUploadSigner, PresignedUpload, UploadService
from emotriage.uploads.application.dto import PresignRequest, PresignResponse

__all__ = [
    "IUploadSigner",
    "PresignedUpload",
    "UploadService",
    "PresignRequest",
    "PresignResponse",
]
