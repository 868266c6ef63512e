"""Restaurant image upload endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from restaurant_media.auth.signer import AuthError
from restaurant_media.core.config import settings
from restaurant_media.deps import get_uploader
from restaurant_media.schemas.api import BatchUploadResponse
from restaurant_media.schemas.domain import UploadRequest, UploadResult
from restaurant_media.services.image_codec import ImageDecodeError, ImageEncodeError
from restaurant_media.services.preprocessor import ImagePolicy
from restaurant_media.services.uploader import UploadOrchestrator
from restaurant_media.storage.contracts import UploadError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/uploads", tags=["uploads"])

# Main image plus three additional images per restaurant
MAX_BATCH_FILES = 4


async def _read_request(file: UploadFile) -> UploadRequest:
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files supported")

    content = await file.read()
    max_bytes = settings.MAX_FILE_SIZE_MB * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds {settings.MAX_FILE_SIZE_MB}MB limit",
        )

    return UploadRequest(
        data=content,
        declared_mime_type=file.content_type,
        original_file_name=file.filename or "",
    )


def _to_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, ImageDecodeError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, ImageEncodeError):
        return HTTPException(status_code=500, detail=str(exc))
    # AuthError / UploadError: the upstream service rejected us
    return HTTPException(status_code=502, detail=str(exc))


@router.post("/images", response_model=UploadResult)
async def upload_image(
    file: UploadFile,
    policy: Optional[ImagePolicy] = None,
    uploader: UploadOrchestrator = Depends(get_uploader),
):
    """Upload one restaurant image and return its public URL."""
    request = await _read_request(file)
    try:
        return await uploader.upload(request, policy)
    except (ImageDecodeError, ImageEncodeError, AuthError, UploadError) as exc:
        logger.warning("Image upload failed for %s: %s", file.filename, exc)
        raise _to_http_error(exc) from exc


@router.post("/images/batch", response_model=BatchUploadResponse)
async def upload_images(
    files: list[UploadFile] = File(...),
    policy: Optional[ImagePolicy] = None,
    uploader: UploadOrchestrator = Depends(get_uploader),
):
    """Upload a restaurant's image set in order; the first failure aborts the rest."""
    if not 1 <= len(files) <= MAX_BATCH_FILES:
        raise HTTPException(
            status_code=400,
            detail=f"Expected between 1 and {MAX_BATCH_FILES} files",
        )

    requests = [await _read_request(f) for f in files]
    try:
        items = await uploader.upload_many(requests, policy)
    except (ImageDecodeError, ImageEncodeError, AuthError, UploadError) as exc:
        logger.warning("Batch image upload failed: %s", exc)
        raise _to_http_error(exc) from exc
    return BatchUploadResponse(items=items)
