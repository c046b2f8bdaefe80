"""
Shared API Middleware
======================

Common middleware and exception handlers for the FastAPI application.

Every error leaves the service in the same envelope:
``{"ok": false, "error": {"code": ..., "message": ...}}``
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from emotriage.config import ErrorCode
from emotriage.core import ApplicationException
from emotriage.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

# Fallback error codes for unhandled exceptions, by path suffix
FALLBACK_ERROR_CODES = {
    "/presign": (ErrorCode.PRESIGN_FAILED, "Failed to generate presigned URL."),
}
DEFAULT_FALLBACK = (ErrorCode.ANALYZE_FAILED, "Analyze failed.")


def error_response(status_code: int, code: str, message: str, correlation_id: str) -> JSONResponse:
    """Build the error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "error": {"code": code, "message": message}},
        headers={"X-Correlation-ID": correlation_id}
    )


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Adds correlation ID to requests for tracing.

    Reuses an incoming X-Correlation-ID header or generates one.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Measures response time.

    Exposes the response time as a header for debugging.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        response_time = time.perf_counter() - start_time
        response.headers["X-Response-Time"] = f"{response_time:.3f}s"
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs all requests and responses.

    Request bodies are never logged (they may carry free-text context).
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = getattr(request.state, "correlation_id", "unknown")
        start_time = time.perf_counter()

        logger.info(
            "Request started",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None
            }
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "correlation_id": correlation_id,
                    "method": request.method,
                    "path": request.url.path,
                    "error": str(e),
                    "response_time_ms": int((time.perf_counter() - start_time) * 1000)
                }
            )
            raise

        logger.info(
            "Request completed",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "response_time_ms": int((time.perf_counter() - start_time) * 1000)
            }
        )
        return response


async def application_exception_handler(request: Request, exc: ApplicationException) -> JSONResponse:
    """Render an application exception with its own code and status."""
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request rejected",
        extra={
            "correlation_id": correlation_id,
            "path": request.url.path,
            "error_code": exc.code.value,
            "error_message": str(exc),
            "details": exc.details
        }
    )
    return error_response(exc.status_code, exc.code.value, exc.message, correlation_id)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies become BAD_REQUEST."""
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request: {location}: {first.get('msg', 'malformed body')}" if location \
        else "Invalid request body."

    logger.warning(
        "Request validation failed",
        extra={"correlation_id": correlation_id, "path": request.url.path, "error_count": len(errors)}
    )
    return error_response(400, ErrorCode.BAD_REQUEST.value, message, correlation_id)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled exceptions.

    Internal details are never exposed; the error code depends on the route.
    """
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    logger.error(
        "Unhandled exception",
        extra={
            "correlation_id": correlation_id,
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_message": str(exc)
        }
    )

    code, message = DEFAULT_FALLBACK
    for suffix, fallback in FALLBACK_ERROR_CODES.items():
        if request.url.path.endswith(suffix):
            code, message = fallback
            break

    return error_response(500, code.value, message, correlation_id)
