"""API routers for the note history service."""

from .health import router as health_router
from .versions import router as versions_router

__all__ = ["versions_router", "health_router"]
