"""Upload interface adapters (controllers)."""

from emotriage.uploads.interfaces.controllers import uploads_router

__all__ = ["uploads_router"]
