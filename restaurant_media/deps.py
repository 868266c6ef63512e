"""Shared dependencies for FastAPI routes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import HTTPException, Request

if TYPE_CHECKING:
    from restaurant_media.services.uploader import UploadOrchestrator


def get_uploader(request: Request) -> "UploadOrchestrator":
    """Return the orchestrator built at startup, or 503 when storage is unconfigured."""
    uploader = getattr(request.app.state, "uploader", None)
    if uploader is None:
        raise HTTPException(status_code=503, detail="Image upload service unavailable")
    return uploader


__all__ = ["get_uploader"]
