"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from restaurant_media.core.config import settings
from restaurant_media.core.logging import setup_logging
from restaurant_media.routes import health_router, uploads_router
from restaurant_media.storage.factory import build_http_client, build_uploader

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize resources on startup, cleanup on shutdown."""
    setup_logging()

    client = build_http_client(settings)
    app.state.http_client = client

    # Uploader - tolerate missing configuration
    if settings.storage_configured:
        app.state.uploader = build_uploader(settings, client)
        logger.info(
            "Uploading to bucket %s (policy=%s)",
            settings.GCS_BUCKET,
            settings.IMAGE_POLICY.value,
        )
    else:
        logger.warning("Storage credentials not configured; uploads disabled")
        app.state.uploader = None

    try:
        yield
    finally:
        await client.aclose()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# Register routers
app.include_router(health_router)
app.include_router(uploads_router)
