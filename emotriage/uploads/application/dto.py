"""
Upload Application DTOs
========================

Pydantic models for the presign endpoint.
"""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from emotriage.uploads.application.services import PresignedUpload


class PresignRequest(BaseModel):
    """Request model for an upload URL."""
    model_config = ConfigDict(populate_by_name=True)

    content_type: Optional[str] = Field(
        None,
        alias="contentType",
        description="image/png or image/jpeg"
    )


class PresignResponse(BaseModel):
    """Response model for an upload URL."""
    model_config = ConfigDict(populate_by_name=True)

    ok: Literal[True] = True
    upload_url: str = Field(..., alias="uploadUrl")
    key: str
    expires_in_sec: int = Field(..., alias="expiresInSec")
    required_headers: Dict[str, str] = Field(
        ...,
        alias="requiredHeaders",
        description="Headers the client MUST send with the PUT, or the signature will not match"
    )

    @classmethod
    def from_upload(cls, upload: PresignedUpload) -> "PresignResponse":
        return cls(
            upload_url=upload.upload_url,
            key=upload.key,
            expires_in_sec=upload.expires_in_sec,
            required_headers=dict(upload.required_headers)
        )
