"""
Triage External Service Adapters
==================================

Adapters for external services (object storage, inference, metrics) used by
the triage module.

Implements the interfaces defined in the application layer using the
concrete infrastructure clients.
"""

from typing import Any, Optional

from emotriage.infrastructure.inference import HuggingFaceInferenceClient
from emotriage.infrastructure.storage import S3StorageClient
from emotriage.shared.infrastructure.grafana import GrafanaOTLPExporter
from emotriage.triage.application import IEmotionClassifier, IMetricsExporter, IObjectStorage
from emotriage.triage.domain import TriageResult


class S3ObjectStorageAdapter(IObjectStorage):
    """Reads uploaded images from the S3 upload bucket."""

    def __init__(self, client: S3StorageClient):
        self._client = client

    async def get_object(self, key: str) -> bytes:
        return await self._client.get_object(key)

    async def get_content_type(self, key: str) -> Optional[str]:
        return await self._client.head_object(key)


class HuggingFaceClassifierAdapter(IEmotionClassifier):
    """Emotion classification through the Hugging Face inference router."""

    def __init__(self, client: HuggingFaceInferenceClient):
        self._client = client

    @property
    def model_id(self) -> str:
        return self._client.model

    async def classify(self, image: bytes, content_type: str) -> Any:
        return await self._client.classify_image(image, content_type)


class GrafanaMetricsAdapter(IMetricsExporter):
    """Pushes per-analysis metrics through the Grafana OTLP exporter."""

    def __init__(self, exporter: GrafanaOTLPExporter):
        self._exporter = exporter

    def is_enabled(self) -> bool:
        return self._exporter.is_enabled()

    async def export_analysis_metrics(self, result: TriageResult, model: str) -> bool:
        return await self._exporter.export_analysis_metrics(
            model=model,
            priority=result.priority.value,
            signal=result.emotion.signal.value,
            score=result.emotion.score,
            total_ms=result.timings.total_ms,
            io_ms=result.timings.io_ms,
            classifier_ms=result.timings.classifier_ms,
            rules_ms=result.timings.rules_ms
        )
