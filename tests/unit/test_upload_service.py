"""Tests for presigned upload issuance."""

import re
from datetime import datetime, timezone

import pytest

from emotriage.config import ContentType
from emotriage.core import InvalidContentTypeException, PresignException
from emotriage.uploads.application import UploadService

from tests.conftest import FakeSigner

NOW = datetime(2024, 1, 15, 23, 59, tzinfo=timezone.utc)
UUID_RE = r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}"


@pytest.mark.asyncio
@pytest.mark.parametrize("content_type,extension", [("image/png", "png"), ("image/jpeg", "jpg")])
async def test_create_upload(signer, content_type, extension):
    service = UploadService(signer)

    upload = await service.create_upload(content_type, now=NOW)

    assert re.fullmatch(rf"uploads/2024-01-15/{UUID_RE}\.{extension}", upload.key)
    assert upload.upload_url == f"https://bucket.example/{upload.key}?signed=1"
    assert upload.expires_in_sec == 300
    assert upload.required_headers == {"Content-Type": content_type}
    assert signer.calls == [(upload.key, content_type, 300)]


@pytest.mark.asyncio
async def test_custom_prefix_and_expiry(signer):
    service = UploadService(signer, prefix="/inbox/", expires_in_sec=60)

    upload = await service.create_upload("image/png", now=NOW)

    assert upload.key.startswith("inbox/2024-01-15/")
    assert upload.expires_in_sec == 60


@pytest.mark.asyncio
async def test_keys_are_unique(signer):
    service = UploadService(signer)

    first = await service.create_upload("image/png", now=NOW)
    second = await service.create_upload("image/png", now=NOW)

    assert first.key != second.key


@pytest.mark.asyncio
@pytest.mark.parametrize("content_type", [None, "", "image/gif", "IMAGE/PNG", "image/jpg", "application/pdf"])
async def test_rejects_other_content_types(signer, content_type):
    service = UploadService(signer)

    with pytest.raises(InvalidContentTypeException) as exc_info:
        await service.create_upload(content_type)

    assert exc_info.value.message == "Only image/png or image/jpeg allowed."
    assert signer.calls == []


@pytest.mark.asyncio
async def test_signer_failure_propagates():
    service = UploadService(FakeSigner(error=PresignException()))

    with pytest.raises(PresignException):
        await service.create_upload("image/jpeg")


def test_build_key_uses_utc_date(signer):
    key = UploadService(signer).build_key(ContentType.JPEG, now=NOW)
    assert key.startswith("uploads/2024-01-15/")
    assert key.endswith(".jpg")
