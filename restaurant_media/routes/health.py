"""Health check endpoints."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from restaurant_media.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    """Liveness check."""
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness check - verifies storage configuration and the uploader."""
    checks = {}
    all_ok = True

    if settings.storage_configured:
        checks["config"] = "ok"
    else:
        checks["config"] = "missing storage credentials"
        all_ok = False

    if getattr(request.app.state, "uploader", None) is not None:
        checks["uploader"] = "ok"
    else:
        checks["uploader"] = "not initialized"
        all_ok = False

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={"status": "ok" if all_ok else "degraded", "checks": checks},
    )
