"""
Triage Infrastructure Layer
============================

External service adapters for the triage module (object storage,
inference, metrics).
"""

from emotriage.triage.infrastructure.external import (
    S3ObjectStorageAdapter,
    HuggingFaceClassifierAdapter,
    GrafanaMetricsAdapter,
)

__all__ = [
    "S3ObjectStorageAdapter",
    "HuggingFaceClassifierAdapter",
    "GrafanaMetricsAdapter",
]
