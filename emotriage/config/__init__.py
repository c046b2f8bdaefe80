"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from enum import Enum
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="emotriage", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== Object Storage (S3) ==========
    upload_bucket: Optional[str] = Field(
        default=None,
        description="S3 bucket that receives uploaded images"
    )
    aws_region: Optional[str] = Field(
        default=None,
        description="AWS region for the S3 client (falls back to the boto3 default chain)"
    )
    upload_prefix: str = Field(
        default="uploads",
        description="Key prefix for presigned uploads"
    )
    presign_expires_seconds: int = Field(
        default=300,
        description="Lifetime of a presigned upload URL",
        ge=1,
        le=3600
    )

    # ========== Hugging Face Inference ==========
    hf_token: Optional[str] = Field(
        default=None,
        description="Hugging Face access token"
    )
    hf_model: str = Field(
        default="",
        description="Image emotion classification model id"
    )
    hf_base_url: str = Field(
        default="https://router.huggingface.co/hf-inference/models",
        description="Base URL of the inference router"
    )
    hf_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for a single inference call",
        gt=0,
        le=120
    )

    # ========== Security ==========
    shared_secret: Optional[str] = Field(
        default=None,
        description="Pre-shared secret expected in the X-Shared-Secret header"
    )

    # ========== Triage Rules ==========
    high_signal_threshold: float = Field(
        default=0.6,
        description="Minimum classifier score for an emotion signal to be trusted",
        ge=0.0,
        le=1.0
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # ========== Grafana OTLP Metrics ==========
    grafana_host: Optional[str] = Field(
        default=None,
        description="Grafana OTLP gateway URL (e.g., https://otlp-gateway-prod-eu-west-2.grafana.net)"
    )
    grafana_api_key: Optional[str] = Field(
        default=None,
        description="Grafana API key for OTLP authentication"
    )
    grafana_instance_id: Optional[str] = Field(
        default=None,
        description="Grafana instance ID for OTLP authentication"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class Priority(str, Enum):
    """Triage priority tiers, most urgent first."""
    P0 = "P0"
    P1 = "P1"
    P2 = "P2"

    @property
    def urgency(self) -> int:
        """Higher is more urgent."""
        return {"P0": 2, "P1": 1, "P2": 0}[self.value]


class EmotionSignal(str, Enum):
    """Coarse emotional categories derived from classifier labels."""
    FRUSTRATION = "frustration"
    NEUTRAL = "neutral"
    POSITIVE = "positive"
    UNCERTAIN = "uncertain"


class EmotionLabel(str, Enum):
    """Label vocabulary of the facial emotion classifier."""
    ANGRY = "angry"
    DISGUST = "disgust"
    FEAR = "fear"
    HAPPY = "happy"
    SAD = "sad"
    SURPRISE = "surprise"
    NEUTRAL = "neutral"


class ContentType(str, Enum):
    """Image content types accepted for upload."""
    PNG = "image/png"
    JPEG = "image/jpeg"

    @property
    def extension(self) -> str:
        return "png" if self is ContentType.PNG else "jpg"


class ErrorCode(str, Enum):
    """Stable error codes returned in the error envelope."""
    INVALID_CONTENT_TYPE = "INVALID_CONTENT_TYPE"
    UNAUTHORIZED = "UNAUTHORIZED"
    IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
    HF_INFERENCE_FAILED = "HF_INFERENCE_FAILED"
    PRESIGN_FAILED = "PRESIGN_FAILED"
    ANALYZE_FAILED = "ANALYZE_FAILED"
    BAD_REQUEST = "BAD_REQUEST"


# ========== Defaults ==========

DEFAULT_CONTENT_TYPE = "application/octet-stream"
