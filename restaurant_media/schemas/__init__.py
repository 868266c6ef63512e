"""Domain and API schemas for image uploads."""

from restaurant_media.schemas.api import BatchUploadResponse
from restaurant_media.schemas.domain import UploadRequest, UploadResult

__all__ = [
    "BatchUploadResponse",
    "UploadRequest",
    "UploadResult",
]
