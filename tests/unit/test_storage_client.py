"""Tests for the S3 storage client."""

import io
from urllib.parse import urlparse

import boto3
import pytest
from botocore.response import StreamingBody
from botocore.stub import Stubber

from emotriage.core import ConfigurationException, ObjectNotFoundException
from emotriage.infrastructure.storage import S3StorageClient

BUCKET = "test-bucket"
KEY = "uploads/2024-01-15/img.png"


@pytest.fixture
def s3():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def stubber(s3):
    with Stubber(s3) as stub:
        yield stub
        stub.assert_no_pending_responses()


@pytest.fixture
def storage(s3):
    return S3StorageClient(bucket=BUCKET, client=s3)


def test_requires_bucket(monkeypatch, s3):
    from emotriage.infrastructure import storage as storage_module

    monkeypatch.setattr(storage_module.settings, "upload_bucket", None)
    with pytest.raises(ConfigurationException):
        S3StorageClient(bucket=None, client=s3)


@pytest.mark.asyncio
async def test_get_object_reads_body(stubber, storage):
    data = b"\x89PNG image"
    stubber.add_response(
        "get_object",
        {"Body": StreamingBody(io.BytesIO(data), len(data))},
        {"Bucket": BUCKET, "Key": KEY},
    )

    assert await storage.get_object(KEY) == data


@pytest.mark.asyncio
async def test_get_object_missing_raises_not_found(stubber, storage):
    stubber.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)

    with pytest.raises(ObjectNotFoundException) as exc_info:
        await storage.get_object(KEY)

    assert exc_info.value.key == KEY
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_head_object_returns_content_type(stubber, storage):
    stubber.add_response("head_object", {"ContentType": "image/png"}, {"Bucket": BUCKET, "Key": KEY})

    assert await storage.head_object(KEY) == "image/png"


@pytest.mark.asyncio
async def test_head_object_without_content_type(stubber, storage):
    stubber.add_response("head_object", {}, {"Bucket": BUCKET, "Key": KEY})

    assert await storage.head_object(KEY) is None


@pytest.mark.asyncio
async def test_generate_upload_url(storage):
    url = await storage.generate_upload_url(KEY, "image/png", 300)

    parsed = urlparse(url)
    assert parsed.scheme == "https"
    assert parsed.path.endswith(KEY)
    assert BUCKET in parsed.netloc + parsed.path
    assert "Signature" in parsed.query
