"""
Triage Rules
============

Deterministic decision rules of the triage engine.

Every table is an ordered tuple evaluated first-match-wins; order is part of
the behaviour. All functions are total: unknown labels, missing scores and
empty text resolve to explicit defaults instead of raising.
"""

import math
from collections.abc import Mapping
from typing import Any, Optional, Tuple

from emotriage.config import EmotionLabel, EmotionSignal, Priority
from emotriage.triage.domain.entities import (
    ClassificationResult,
    DEFAULT_CLASSIFICATION,
    KeywordMatch,
    NormalizedSignal,
)

HIGH_SIGNAL_THRESHOLD = 0.6

LABEL_SIGNALS: Tuple[Tuple[EmotionLabel, EmotionSignal], ...] = (
    (EmotionLabel.ANGRY, EmotionSignal.FRUSTRATION),
    (EmotionLabel.DISGUST, EmotionSignal.FRUSTRATION),
    (EmotionLabel.FEAR, EmotionSignal.FRUSTRATION),
    (EmotionLabel.HAPPY, EmotionSignal.POSITIVE),
    (EmotionLabel.SAD, EmotionSignal.UNCERTAIN),
    (EmotionLabel.SURPRISE, EmotionSignal.UNCERTAIN),
    (EmotionLabel.NEUTRAL, EmotionSignal.NEUTRAL),
)

KEYWORD_TIERS: Tuple[Tuple[Priority, Tuple[str, ...]], ...] = (
    (Priority.P0, ("checkout", "payment failed", "can't login", "cant login", "500", "down", "incident")),
    (Priority.P1, ("bug", "broken", "slow", "error")),
    (Priority.P2, ("how to", "question", "cosmetic")),
)
DEFAULT_TIER = Priority.P2

HIGH_IMPACT_KEYWORDS: Tuple[str, ...] = ("checkout", "payment", "login", "500", "down")

NEXT_STEPS: Tuple[Tuple[Priority, str], ...] = (
    (Priority.P0, "Treat as incident: page on-call, confirm scope, start comms if widespread."),
    (Priority.P1, "Create a bug ticket, assign an owner, request repro steps and logs."),
)
DEFAULT_NEXT_STEP = "Request clarification or share help article; triage during normal queue."

KEYWORDS_CLAUSE = "Used text context keywords."
FRUSTRATION_CLAUSE = "Detected high-frustration emotion signal."
LOW_CONFIDENCE_CLAUSE = "Emotion confidence low; treated as uncertain."


def _coerce_score(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        score = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    return score if math.isfinite(score) else 0.0


def _to_classification(entry: Any) -> ClassificationResult:
    if not isinstance(entry, Mapping):
        return ClassificationResult(label="", score=0.0)
    label = entry.get("label")
    return ClassificationResult(
        label=label.lower() if isinstance(label, str) else "",
        score=_coerce_score(entry.get("score")),
    )


class SignalNormalizer:
    """
    Maps raw classifier output onto an emotion signal and confidence flag.

    A signal is only trusted when the score reaches the threshold and the
    label maps to something other than ``uncertain``; anything else collapses
    to ``(uncertain, not confident)``.
    """

    def __init__(self, threshold: float = HIGH_SIGNAL_THRESHOLD):
        self.threshold = threshold

    @staticmethod
    def select_top(predictions: Any) -> ClassificationResult:
        """
        Pick the prediction with the strictly greatest score.

        Ties keep the first-seen entry. Empty or non-list input yields
        ``neutral`` with score 0.
        """
        if not isinstance(predictions, (list, tuple)) or not predictions:
            return DEFAULT_CLASSIFICATION

        candidates = [_to_classification(entry) for entry in predictions]
        best = candidates[0]
        for candidate in candidates[1:]:
            if candidate.score > best.score:
                best = candidate
        return best

    @staticmethod
    def base_signal(label: Optional[str]) -> Optional[EmotionSignal]:
        """Table lookup; None for labels outside the classifier vocabulary."""
        lowered = (label or "").lower()
        for known, signal in LABEL_SIGNALS:
            if lowered == known.value:
                return signal
        return None

    def normalize(self, label: Optional[str], score: Optional[float]) -> NormalizedSignal:
        signal = self.base_signal(label)
        if signal is None:
            return NormalizedSignal(EmotionSignal.UNCERTAIN, False)

        confident = _coerce_score(score) >= self.threshold and signal is not EmotionSignal.UNCERTAIN
        if not confident:
            return NormalizedSignal(EmotionSignal.UNCERTAIN, False)
        return NormalizedSignal(signal, True)


class KeywordClassifier:
    """Keyword tiers and the high-impact flag over free-text context."""

    @staticmethod
    def classify(text: Optional[str]) -> KeywordMatch:
        folded = (text or "").casefold()
        if not folded.strip():
            return KeywordMatch(DEFAULT_TIER, False)

        base_tier = DEFAULT_TIER
        for tier, keywords in KEYWORD_TIERS:
            if any(keyword in folded for keyword in keywords):
                base_tier = tier
                break

        high_impact = any(keyword in folded for keyword in HIGH_IMPACT_KEYWORDS)
        return KeywordMatch(base_tier, high_impact)


class PriorityResolver:
    """
    Applies emotion-based escalation to the keyword base tier.

    Escalation only ever moves toward P0; P0 itself is never changed.
    """

    @staticmethod
    def resolve(
        base_tier: Priority,
        signal: EmotionSignal,
        confident: bool,
        high_impact: bool
    ) -> Priority:
        frustrated = confident and signal == EmotionSignal.FRUSTRATION

        if base_tier == Priority.P1 and frustrated and high_impact:
            return Priority.P0
        if base_tier == Priority.P2 and frustrated:
            return Priority.P1
        return Priority(base_tier)


class RationaleBuilder:
    """Human-readable explanation and recommended action."""

    @staticmethod
    def rationale(text: Optional[str], signal: EmotionSignal, confident: bool) -> str:
        parts = []
        if (text or "").strip():
            parts.append(KEYWORDS_CLAUSE)
        if confident and signal == EmotionSignal.FRUSTRATION:
            parts.append(FRUSTRATION_CLAUSE)
        if not confident:
            parts.append(LOW_CONFIDENCE_CLAUSE)
        return " ".join(parts)

    @staticmethod
    def next_step(priority: Any) -> str:
        for tier, step in NEXT_STEPS:
            if priority == tier:
                return step
        return DEFAULT_NEXT_STEP
