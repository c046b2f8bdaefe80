"""
Triage Application DTOs
========================

Data Transfer Objects for the triage API layer.

Pydantic models for request/response validation. Wire names are camelCase
(the contract shared with the web client); Python attributes stay snake_case.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from emotriage.triage.domain import TriageResult


# ========== Type Aliases for Literals ==========
PriorityStr = Literal["P0", "P1", "P2"]
EmotionSignalStr = Literal["frustration", "neutral", "positive", "uncertain"]


class CamelModel(BaseModel):
    """Base model accepting both field names and aliases."""
    model_config = ConfigDict(populate_by_name=True)


# ========== Request DTOs ==========

class AnalyzeRequest(CamelModel):
    """Request model for image analysis."""
    key: Optional[str] = Field(None, description="Object key returned by POST /presign")
    text_context: str = Field(
        default="",
        alias="textContext",
        description="Optional free-text description of the problem"
    )

    @field_validator("text_context", mode="before")
    @classmethod
    def coerce_text_context(cls, v: Any) -> str:
        """Absent or null context is empty; scalars are stringified."""
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)


# ========== Response DTOs ==========

class EmotionInfo(BaseModel):
    """Emotion block of the analysis response."""
    label: str
    score: float = Field(..., description="Classifier score rounded to 3 decimals")
    signal: EmotionSignalStr


class TimingsInfo(CamelModel):
    """Elapsed milliseconds per stage."""
    total: int
    s3_get: int = Field(..., alias="s3Get")
    hf_call: int = Field(..., alias="hfCall")
    rules: int


class MetaInfo(CamelModel):
    """Request metadata echoed back to the client."""
    model: str
    received_text_context: bool = Field(..., alias="receivedTextContext")


class AnalyzeResponse(CamelModel):
    """Response model for image analysis."""
    ok: Literal[True] = True
    priority: PriorityStr
    emotion: EmotionInfo
    rationale: str
    next_step: str = Field(..., alias="nextStep")
    timings_ms: TimingsInfo = Field(..., alias="timingsMs")
    meta: Optional[MetaInfo] = None

    @classmethod
    def from_result(
        cls,
        result: TriageResult,
        model: str,
        text_context: str
    ) -> "AnalyzeResponse":
        """Create from a domain triage result."""
        return cls(
            priority=result.priority.value,
            emotion=EmotionInfo(
                label=result.emotion.label,
                score=round(result.emotion.score, 3),
                signal=result.emotion.signal.value
            ),
            rationale=result.rationale,
            next_step=result.next_step,
            timings_ms=TimingsInfo(
                total=result.timings.total_ms,
                s3_get=result.timings.io_ms,
                hf_call=result.timings.classifier_ms,
                rules=result.timings.rules_ms
            ),
            meta=MetaInfo(model=model, received_text_context=len(text_context) > 0)
        )


class ErrorInfo(BaseModel):
    """Error detail inside the error envelope."""
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope shared by every endpoint."""
    ok: Literal[False] = False
    error: ErrorInfo
