"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

Every exception carries a stable error code and the HTTP status it maps to, so
the API boundary can render a consistent error envelope without inspecting
the exception type. The triage engine itself never raises any of these; they
belong to the collaborators around it (storage, classifier, request handling).
"""

from typing import Optional

from emotriage.config import ErrorCode


class ApplicationException(Exception):
    """Base exception for all application errors."""

    code: ErrorCode = ErrorCode.ANALYZE_FAILED
    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationException(ApplicationException):
    """Exception for malformed requests."""

    code = ErrorCode.BAD_REQUEST
    status_code = 400


class InvalidContentTypeException(ValidationException):
    """Upload content type is not on the allow-list."""

    code = ErrorCode.INVALID_CONTENT_TYPE


class UnauthorizedException(ApplicationException):
    """Missing or mismatched shared secret."""

    code = ErrorCode.UNAUTHORIZED
    status_code = 401

    def __init__(self, message: str = "Missing or invalid secret.", details: Optional[dict] = None):
        super().__init__(message, details)


class ObjectNotFoundException(ApplicationException):
    """Exception when a stored object cannot be read."""

    code = ErrorCode.IMAGE_NOT_FOUND
    status_code = 404

    def __init__(self, key: str, details: Optional[dict] = None):
        self.key = key
        super().__init__("Image key not found in storage.", details or {"key": key})


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class ExternalServiceException(ApplicationException):
    """Base exception for external service failures."""

    status_code = 502

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.service_name = service_name
        super().__init__(message, details)

    def __str__(self) -> str:
        return f"{self.service_name}: {self.message}"


class ClassifierException(ExternalServiceException):
    """Exception for emotion classifier failures."""

    code = ErrorCode.HF_INFERENCE_FAILED

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        details: Optional[dict] = None
    ):
        self.status = status
        super().__init__("Emotion Classifier", message, details)


class PresignException(ExternalServiceException):
    """Exception when an upload URL cannot be generated."""

    code = ErrorCode.PRESIGN_FAILED
    status_code = 500

    def __init__(self, message: str = "Failed to generate presigned URL.", details: Optional[dict] = None):
        super().__init__("Object Storage", message, details)
