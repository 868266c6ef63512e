"""Domain models for image uploads."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadRequest(BaseModel):
    """Raw file handed over by the caller."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    declared_mime_type: Optional[str] = None
    original_file_name: str = ""


class UploadResult(BaseModel):
    """Outcome of a successful upload."""

    model_config = ConfigDict(frozen=True)

    public_url: str
    object_name: str
