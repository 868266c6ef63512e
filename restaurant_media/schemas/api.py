"""API response models for upload endpoints."""

from pydantic import BaseModel

from restaurant_media.schemas.domain import UploadResult


class BatchUploadResponse(BaseModel):
    """Uploaded image set, in request order."""

    items: list[UploadResult]
