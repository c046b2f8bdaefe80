"""
Triage Application Layer
=========================

Application layer for the triage module.

Contains:
- Services: the triage engine and the analysis orchestration around it
- DTOs: Data transfer objects for API serialization
"""

from emotriage.triage.application.dto import (
    AnalyzeRequest,
    AnalyzeResponse,
    EmotionInfo,
    TimingsInfo,
    MetaInfo,
    ErrorInfo,
    ErrorResponse,
)
from emotriage.triage.application.services import (
    TriageConfig,
    TriageEngine,
    AnalysisService,
    IObjectStorage,
    IEmotionClassifier,
    IMetricsExporter,
)

__all__ = [
    # DTOs
    "AnalyzeRequest",
    "AnalyzeResponse",
    "EmotionInfo",
    "TimingsInfo",
    "MetaInfo",
    "ErrorInfo",
    "ErrorResponse",
    # Services
    "TriageConfig",
    "TriageEngine",
    "AnalysisService",
    # Collaborator Interfaces
    "IObjectStorage",
    "IEmotionClassifier",
    "IMetricsExporter",
]
