"""Tests for the Hugging Face inference client."""

import json

import httpx
import pytest

from emotriage.core import ClassifierException
from emotriage.infrastructure.inference import HuggingFaceInferenceClient

PREDICTIONS = [{"label": "angry", "score": 0.9}, {"label": "neutral", "score": 0.1}]


def make_client(handler, token="hf_test", model="trpakov/vit-face-expression"):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HuggingFaceInferenceClient(
        token=token,
        model=model,
        base_url="https://router.example/models/",
        http_client=http_client
    )


@pytest.mark.asyncio
async def test_posts_image_with_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = request.content
        return httpx.Response(200, json=PREDICTIONS)

    client = make_client(handler)
    result = await client.classify_image(b"jpegbytes", "image/jpeg")

    assert result == PREDICTIONS
    assert seen["url"] == "https://router.example/models/trpakov/vit-face-expression"
    assert seen["headers"]["content-type"] == "image/jpeg"
    assert seen["headers"]["accept"] == "application/json"
    assert seen["headers"]["authorization"] == "Bearer hf_test"
    assert seen["body"] == b"jpegbytes"


@pytest.mark.asyncio
async def test_no_authorization_without_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["headers"] = request.headers
        return httpx.Response(200, json=[])

    client = make_client(handler, token="")
    await client.classify_image(b"x", "image/png")

    assert "authorization" not in seen["headers"]


def test_model_is_stripped():
    client = make_client(lambda request: httpx.Response(200, json=[]), model="  org/model \n")
    assert client.model == "org/model"
    assert client.model_url == "https://router.example/models/org/model"


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 401, 404, 500, 503])
async def test_error_status_raises(status):
    client = make_client(lambda request: httpx.Response(status, text="model is loading" * 100))

    with pytest.raises(ClassifierException) as exc_info:
        await client.classify_image(b"x", "image/png")

    assert exc_info.value.status == status
    assert exc_info.value.message == f"HF failed: {status}"
    assert exc_info.value.code.value == "HF_INFERENCE_FAILED"
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_non_json_body_raises():
    client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(ClassifierException) as exc_info:
        await client.classify_image(b"x", "image/png")

    assert exc_info.value.message == "HF returned a non-JSON body"


@pytest.mark.asyncio
async def test_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(ClassifierException) as exc_info:
        await client.classify_image(b"x", "image/png")

    assert exc_info.value.message == "HF request failed: ConnectError"
    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_returns_payload_untouched():
    body = {"error": "unexpected shape"}
    client = make_client(lambda request: httpx.Response(200, content=json.dumps(body).encode()))
    assert await client.classify_image(b"x", "image/png") == body


@pytest.mark.asyncio
async def test_close_leaves_injected_client_open():
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[])))
    client = HuggingFaceInferenceClient(token="t", model="m", http_client=http_client)

    await client.close()

    assert not http_client.is_closed
    await http_client.aclose()
