"""
Triage Application Services
============================

Application services for emotion-aware triage.

``TriageEngine`` is the pure decision engine; ``AnalysisService`` performs the
I/O around it (object fetch, metadata lookup, classifier call) and invokes the
engine exactly once per request with fully resolved inputs.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from emotriage.config import DEFAULT_CONTENT_TYPE
from emotriage.core import ValidationException
from emotriage.shared.infrastructure.logging import elapsed_ms, get_logger, log_latency
from emotriage.triage.domain import (
    HIGH_SIGNAL_THRESHOLD,
    EmotionReading,
    KeywordClassifier,
    PriorityResolver,
    RationaleBuilder,
    SignalNormalizer,
    TriageResult,
    TriageTimings,
)

logger = get_logger(__name__)


# ========== Collaborator Interfaces ==========

class IObjectStorage(ABC):
    """Interface for reading uploaded images."""

    @abstractmethod
    async def get_object(self, key: str) -> bytes:
        """Return the object body. Raises ObjectNotFoundException."""

    @abstractmethod
    async def get_content_type(self, key: str) -> Optional[str]:
        """Return the stored content type, if any."""


class IEmotionClassifier(ABC):
    """Interface for the image emotion classifier."""

    @property
    @abstractmethod
    def model_id(self) -> str:
        """Identifier of the model answering requests."""

    @abstractmethod
    async def classify(self, image: bytes, content_type: str) -> Any:
        """
        Return the raw prediction list (``[{"label": ..., "score": ...}]``).

        Raises ClassifierException when the call fails.
        """


class IMetricsExporter(ABC):
    """Interface for pushing per-analysis metrics."""

    @abstractmethod
    def is_enabled(self) -> bool:
        """Whether the exporter is configured."""

    @abstractmethod
    async def export_analysis_metrics(self, result: TriageResult, model: str) -> bool:
        """Push metrics for one analysis; never raises."""


# ========== Triage Engine ==========

@dataclass(frozen=True)
class TriageConfig:
    """Explicit engine configuration; the engine never reads the environment."""
    signal_threshold: float = HIGH_SIGNAL_THRESHOLD


class TriageEngine:
    """
    Deterministic triage decision engine.

    Sequences signal normalization, keyword classification, priority
    resolution and rationale building. Holds no per-request state and
    never raises for malformed predictions or missing text, so a single
    instance can serve concurrent requests.
    """

    def __init__(self, config: Optional[TriageConfig] = None):
        self.config = config or TriageConfig()
        self._normalizer = SignalNormalizer(self.config.signal_threshold)
        self._keywords = KeywordClassifier()
        self._resolver = PriorityResolver()
        self._rationale = RationaleBuilder()

    def triage(
        self,
        predictions: Any,
        text: Optional[str] = "",
        io_ms: int = 0,
        classifier_ms: int = 0,
        started_at: Optional[float] = None
    ) -> TriageResult:
        """
        Derive priority, emotion signal, rationale and next step.

        Args:
            predictions: Raw classifier output (list of label/score mappings)
            text: Optional free-text context
            io_ms: Caller-measured storage time, passed through
            classifier_ms: Caller-measured classifier time, passed through
            started_at: ``time.perf_counter()`` reading at request start;
                when given, total time is measured from it

        Returns:
            TriageResult
        """
        rules_start = time.perf_counter()
        text = text or ""

        top = self._normalizer.select_top(predictions)
        normalized = self._normalizer.normalize(top.label, top.score)
        match = self._keywords.classify(text)
        priority = self._resolver.resolve(
            match.base_tier, normalized.signal, normalized.confident, match.high_impact
        )
        rationale = self._rationale.rationale(text, normalized.signal, normalized.confident)
        next_step = self._rationale.next_step(priority)

        rules_ms = elapsed_ms(rules_start)
        total_ms = elapsed_ms(started_at) if started_at is not None else io_ms + classifier_ms + rules_ms

        logger.debug(
            "Triage decision",
            extra={
                "label": top.label,
                "score": top.score,
                "signal": normalized.signal.value,
                "confident": normalized.confident,
                "base_tier": match.base_tier.value,
                "high_impact": match.high_impact,
                "priority": priority.value
            }
        )

        return TriageResult(
            priority=priority,
            emotion=EmotionReading(label=top.label, score=top.score, signal=normalized.signal),
            rationale=rationale,
            next_step=next_step,
            timings=TriageTimings(
                total_ms=total_ms,
                io_ms=io_ms,
                classifier_ms=classifier_ms,
                rules_ms=rules_ms
            )
        )


# ========== Application Services ==========

class AnalysisService:
    """
    Runs one analysis: fetch image, look up its content type, classify it,
    then hand the predictions to the triage engine.

    Storage and classifier failures propagate as application exceptions and
    the engine is not invoked.
    """

    def __init__(
        self,
        storage: IObjectStorage,
        classifier: IEmotionClassifier,
        engine: TriageEngine,
        metrics: Optional[IMetricsExporter] = None
    ):
        self._storage = storage
        self._classifier = classifier
        self._engine = engine
        self._metrics = metrics

    @property
    def model_id(self) -> str:
        return self._classifier.model_id

    async def analyze(self, key: Optional[str], text_context: Optional[str] = "") -> TriageResult:
        """
        Analyze an uploaded image with optional text context.

        Args:
            key: Object key returned by the upload endpoint
            text_context: Free-text description from the user

        Returns:
            TriageResult with caller timings filled in

        Raises:
            ValidationException: key missing
            ObjectNotFoundException: image cannot be read
            ClassifierException: inference call failed
        """
        if not key or not isinstance(key, str):
            raise ValidationException("Missing key.")

        started_at = time.perf_counter()
        timings: Dict[str, int] = {}

        with log_latency(logger, "object_get", timings, "io", key=key):
            image = await self._storage.get_object(key)

        content_type = DEFAULT_CONTENT_TYPE
        try:
            with log_latency(logger, "object_head", timings, "io", key=key):
                content_type = await self._storage.get_content_type(key) or DEFAULT_CONTENT_TYPE
        except Exception as e:
            logger.warning(
                "Content type lookup failed; defaulting",
                extra={"key": key, "error": type(e).__name__}
            )

        with log_latency(logger, "classifier_call", timings, "classifier", model=self.model_id):
            predictions = await self._classifier.classify(image, content_type)

        result = self._engine.triage(
            predictions,
            text_context or "",
            io_ms=timings.get("io", 0),
            classifier_ms=timings.get("classifier", 0),
            started_at=started_at
        )

        logger.info(
            "Image triaged",
            extra={
                "key": key,
                "priority": result.priority.value,
                "signal": result.emotion.signal.value,
                "label": result.emotion.label,
                "total_ms": result.timings.total_ms
            }
        )

        if self._metrics is not None and self._metrics.is_enabled():
            await self._metrics.export_analysis_metrics(result, self.model_id)

        return result
