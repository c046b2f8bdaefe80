"""Pytest configuration and fixtures."""

from typing import Any, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

from emotriage.config import Settings, get_settings
from emotriage.core import ObjectNotFoundException
from emotriage.main import create_app
from emotriage.triage.application import (
    AnalysisService,
    IEmotionClassifier,
    IObjectStorage,
    TriageEngine,
)
from emotriage.triage.interfaces.controllers import get_analysis_service
from emotriage.uploads.application import IUploadSigner, UploadService
from emotriage.uploads.interfaces.controllers import get_upload_service

SECRET = "test-secret"


class FakeStorage(IObjectStorage):
    """In-memory object storage."""

    def __init__(self, objects: Optional[Dict[str, bytes]] = None, content_types: Optional[Dict[str, str]] = None,
                 head_error: Optional[Exception] = None):
        self.objects = objects or {}
        self.content_types = content_types or {}
        self.head_error = head_error
        self.reads: List[str] = []

    async def get_object(self, key: str) -> bytes:
        self.reads.append(key)
        if key not in self.objects:
            raise ObjectNotFoundException(key)
        return self.objects[key]

    async def get_content_type(self, key: str) -> Optional[str]:
        if self.head_error is not None:
            raise self.head_error
        return self.content_types.get(key)


class FakeClassifier(IEmotionClassifier):
    """Returns canned predictions and records calls."""

    def __init__(self, predictions: Any = None, error: Optional[Exception] = None):
        self.predictions = predictions if predictions is not None else []
        self.error = error
        self.calls: List[tuple] = []

    @property
    def model_id(self) -> str:
        return "test/model"

    async def classify(self, image: bytes, content_type: str) -> Any:
        self.calls.append((image, content_type))
        if self.error is not None:
            raise self.error
        return self.predictions


class FakeSigner(IUploadSigner):
    """Builds deterministic fake URLs."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls: List[tuple] = []

    async def generate_upload_url(self, key: str, content_type: str, expires_in: int) -> str:
        self.calls.append((key, content_type, expires_in))
        if self.error is not None:
            raise self.error
        return f"https://bucket.example/{key}?signed=1"


@pytest.fixture
def settings():
    """Provide settings fixture."""
    return Settings(
        shared_secret=SECRET,
        upload_bucket="test-bucket",
        hf_model="test/model",
        hf_token="hf_test",
    )


@pytest.fixture
def engine():
    return TriageEngine()


@pytest.fixture
def storage():
    return FakeStorage(
        objects={"uploads/2024-01-15/img.png": b"\x89PNG fake"},
        content_types={"uploads/2024-01-15/img.png": "image/png"},
    )


@pytest.fixture
def classifier():
    return FakeClassifier(predictions=[
        {"label": "neutral", "score": 0.05},
        {"label": "angry", "score": 0.91},
        {"label": "sad", "score": 0.04},
    ])


@pytest.fixture
def signer():
    return FakeSigner()


@pytest.fixture
def app(settings, storage, classifier, signer, engine):
    """Application with fake collaborators wired through dependency overrides."""
    application = create_app(settings)
    analysis_service = AnalysisService(storage, classifier, engine)
    upload_service = UploadService(signer)

    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_analysis_service] = lambda: analysis_service
    application.dependency_overrides[get_upload_service] = lambda: upload_service
    return application


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
