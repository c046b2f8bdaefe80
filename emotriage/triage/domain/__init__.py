"""
Triage Domain Layer
===================

Domain layer for the triage module.

Contains:
- Entities: immutable value objects (ClassificationResult, TriageResult, ...)
- Rules: the deterministic decision tables (SignalNormalizer,
  KeywordClassifier, PriorityResolver, RationaleBuilder)

This layer is framework-agnostic and performs no I/O.
"""

from emotriage.triage.domain.entities import (
    ClassificationResult,
    DEFAULT_CLASSIFICATION,
    NormalizedSignal,
    KeywordMatch,
    EmotionReading,
    TriageTimings,
    TriageResult,
)
from emotriage.triage.domain.rules import (
    HIGH_SIGNAL_THRESHOLD,
    SignalNormalizer,
    KeywordClassifier,
    PriorityResolver,
    RationaleBuilder,
)

__all__ = [
    # Entities
    "ClassificationResult",
    "DEFAULT_CLASSIFICATION",
    "NormalizedSignal",
    "KeywordMatch",
    "EmotionReading",
    "TriageTimings",
    "TriageResult",
    # Rules
    "HIGH_SIGNAL_THRESHOLD",
    "SignalNormalizer",
    "KeywordClassifier",
    "PriorityResolver",
    "RationaleBuilder",
]
