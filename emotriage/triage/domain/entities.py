"""
Triage Domain Entities
======================

Immutable value objects produced fresh for every triage request.

Nothing here is persisted or shared between requests.
"""

from dataclasses import dataclass, field

from emotriage.config import EmotionLabel, EmotionSignal, Priority


@dataclass(frozen=True)
class ClassificationResult:
    """
    Top prediction of the emotion classifier.

    ``label`` is kept as the lower-cased raw string so unknown labels survive
    into the response; mapping to a signal happens in the normalizer.
    """
    label: str
    score: float


DEFAULT_CLASSIFICATION = ClassificationResult(label=EmotionLabel.NEUTRAL.value, score=0.0)


@dataclass(frozen=True)
class NormalizedSignal:
    """Emotion signal plus whether the classifier score was strong enough to trust it."""
    signal: EmotionSignal
    confident: bool


@dataclass(frozen=True)
class KeywordMatch:
    """Priority implied by text keywords alone, before emotion escalation."""
    base_tier: Priority
    high_impact: bool


@dataclass(frozen=True)
class EmotionReading:
    """Emotion block of a triage result."""
    label: str
    score: float
    signal: EmotionSignal


@dataclass(frozen=True)
class TriageTimings:
    """
    Elapsed milliseconds per stage.

    ``io_ms`` and ``classifier_ms`` are measured by the caller and passed
    through; ``rules_ms`` is measured by the engine.
    """
    total_ms: int = 0
    io_ms: int = 0
    classifier_ms: int = 0
    rules_ms: int = 0


@dataclass(frozen=True)
class TriageResult:
    """Outcome of one triage decision."""
    priority: Priority
    emotion: EmotionReading
    rationale: str
    next_step: str
    timings: TriageTimings = field(default_factory=TriageTimings)
