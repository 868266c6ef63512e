"""API routes package."""

from restaurant_media.routes.health import router as health_router
from restaurant_media.routes.uploads import router as uploads_router

__all__ = ["health_router", "uploads_router"]
