"""
Emotriage - Main Application
=============================

Emotion-aware support ticket triage.

A user uploads a screenshot or photo together with optional free-text
context; the service classifies the emotion in the image and derives a
ticket priority, a rationale and a recommended next step.

Modules:
- Uploads: presigned image upload URLs
- Triage: image analysis and the deterministic triage engine

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Value objects and decision rules
- Infrastructure: S3, Hugging Face inference, Grafana metrics
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from emotriage.config import Settings, settings as default_settings
from emotriage.core import ApplicationException, ConfigurationException
from emotriage.infrastructure.inference import HuggingFaceInferenceClient
from emotriage.infrastructure.storage import S3StorageClient
from emotriage.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    MetricsMiddleware,
    application_exception_handler,
    global_exception_handler,
    validation_exception_handler,
)
from emotriage.shared.infrastructure.grafana import get_grafana_exporter, init_grafana_exporter
from emotriage.shared.infrastructure.logging import get_logger, setup_logging
from emotriage.triage.application import AnalysisService, TriageConfig, TriageEngine
from emotriage.triage.infrastructure import (
    GrafanaMetricsAdapter,
    HuggingFaceClassifierAdapter,
    S3ObjectStorageAdapter,
)
from emotriage.triage.interfaces import triage_router
from emotriage.uploads.application import UploadService
from emotriage.uploads.infrastructure import S3UploadSignerAdapter
from emotriage.uploads.interfaces import uploads_router

logger = get_logger(__name__)


def build_services(app: FastAPI, settings: Settings) -> Optional[HuggingFaceInferenceClient]:
    """
    Wire collaborators and services onto ``app.state``.

    Returns the inference client so the caller can close it on shutdown.
    Missing storage configuration leaves the storage-backed services unset;
    their routes then answer with a configuration error.
    """
    app.state.settings = settings
    app.state.engine = TriageEngine(TriageConfig(signal_threshold=settings.high_signal_threshold))

    if settings.grafana_host and settings.grafana_api_key and settings.grafana_instance_id:
        exporter = init_grafana_exporter(
            host=settings.grafana_host,
            api_key=settings.grafana_api_key,
            instance_id=settings.grafana_instance_id
        )
    else:
        exporter = get_grafana_exporter()

    try:
        storage = S3StorageClient(bucket=settings.upload_bucket, region=settings.aws_region)
    except ConfigurationException as e:
        logger.warning(f"Object storage not available: {e}")
        app.state.upload_service = None
        app.state.analysis_service = None
        return None

    app.state.upload_service = UploadService(
        S3UploadSignerAdapter(storage),
        prefix=settings.upload_prefix,
        expires_in_sec=settings.presign_expires_seconds
    )

    inference = HuggingFaceInferenceClient(
        token=settings.hf_token,
        model=settings.hf_model,
        base_url=settings.hf_base_url,
        timeout=settings.hf_timeout_seconds
    )
    app.state.analysis_service = AnalysisService(
        storage=S3ObjectStorageAdapter(storage),
        classifier=HuggingFaceClassifierAdapter(inference),
        engine=app.state.engine,
        metrics=GrafanaMetricsAdapter(exporter)
    )
    return inference


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Build storage, inference and metrics clients
    3. Build the triage engine and services

    SHUTDOWN:
    1. Close the inference HTTP client
    """
    settings: Settings = app.state.settings

    # === STARTUP ===
    setup_logging(level=settings.log_level, environment=settings.environment)
    logger.info("Starting Emotriage", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    inference = build_services(app, settings)

    logger.info("Emotriage started successfully", extra={
        "model": settings.hf_model,
        "storage_configured": app.state.analysis_service is not None
    })

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down Emotriage")
    if inference is not None:
        await inference.close()
    logger.info("Emotriage shutdown complete")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create the FastAPI application."""
    settings = settings or default_settings

    app = FastAPI(
        title="Emotriage API",
        description="""
    ## Emotion-Aware Support Triage

    Upload an image, add optional context, get a ticket priority.

    ---

    ### Flow

    1. `POST /presign` - get an upload URL for a PNG or JPEG
    2. `PUT <uploadUrl>` - upload the image with the returned headers
    3. `POST /analyze` - triage the uploaded image (requires `X-Shared-Secret`)

    ---

    ### Priorities

    | Priority | Meaning | Next step |
    |----------|---------|-----------|
    | P0 | Incident | Page on-call, confirm scope, start comms |
    | P1 | Defect | Bug ticket with owner, repro steps and logs |
    | P2 | Normal queue | Clarify or share a help article |

    Text keywords set the base tier; a confident frustration signal from the
    image can escalate it, never lower it.
    """,
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.settings = settings

    # === CORS Middleware ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # === Custom Middleware (from shared) ===
    app.add_middleware(CorrelationIDMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # === Include Module Routers ===
    app.include_router(uploads_router)
    app.include_router(triage_router)

    # === Health Check Endpoint ===

    @app.get("/health", tags=["Health"], responses={
        200: {
            "description": "Service is healthy",
            "content": {
                "application/json": {
                    "example": {
                        "status": "healthy",
                        "version": "1.0.0",
                        "environment": "development",
                        "checks": {
                            "storage": "configured",
                            "classifier_model": "trpakov/vit-face-expression",
                            "shared_secret": "configured",
                            "metrics": "disabled"
                        }
                    }
                }
            }
        }
    })
    async def health_check(request: Request):
        """
        Health check endpoint for load balancers.

        Reports configuration state only; external services are not probed.
        """
        state = request.app.state
        app_settings: Settings = state.settings
        checks = {
            "storage": "configured" if getattr(state, "analysis_service", None) else "not_configured",
            "classifier_model": app_settings.hf_model or "not_configured",
            "shared_secret": "configured" if app_settings.shared_secret else "not_configured",
            "metrics": "enabled" if get_grafana_exporter().is_enabled() else "disabled"
        }

        return {
            "status": "healthy",
            "version": app_settings.app_version,
            "environment": app_settings.environment,
            "checks": checks
        }

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": "Emotriage",
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health",
            "endpoints": [
                "POST /presign - Get a presigned image upload URL",
                "POST /analyze - Triage an uploaded image"
            ]
        }

    return app


app = create_app()


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "emotriage.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.environment == "development",
        log_level="info"
    )
