"""Image preprocessing before upload.

Two policies are supported:

- ``COMPRESS``: decode, shrink so neither side exceeds ``max_dimension``
  while keeping the aspect ratio, re-encode as JPEG.
- ``PASSTHROUGH``: forward the original bytes and MIME type unchanged.
"""

from __future__ import annotations

import logging
import mimetypes
import posixpath
from dataclasses import dataclass
from enum import Enum

from restaurant_media.services.image_codec import ImageCodec, PillowCodec

logger = logging.getLogger(__name__)

MAX_DIMENSION = 1920
JPEG_QUALITY = 0.85
JPEG_MIME_TYPE = "image/jpeg"
DEFAULT_MIME_TYPE = "application/octet-stream"

_MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


class ImagePolicy(str, Enum):
    """Preprocessing strategy applied before upload."""

    COMPRESS = "compress"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True, slots=True)
class ProcessedAsset:
    """Bytes ready for upload plus the metadata needed to name and type them."""

    data: bytes
    mime_type: str
    file_extension: str
    file_name: str
    width: int | None = None
    height: int | None = None


def compute_target_size(width: int, height: int, max_dimension: int = MAX_DIMENSION) -> tuple[int, int]:
    """Scale (width, height) down to fit within max_dimension, keeping the ratio.

    Sizes already within the bound are returned unchanged.
    """
    if width <= max_dimension and height <= max_dimension:
        return width, height
    ratio = min(max_dimension / width, max_dimension / height)
    # Round half up, never collapse a side to zero
    target_w = min(max_dimension, max(1, int(width * ratio + 0.5)))
    target_h = min(max_dimension, max(1, int(height * ratio + 0.5)))
    return target_w, target_h


def _split_name(file_name: str) -> tuple[str, str]:
    base, ext = posixpath.splitext(posixpath.basename(file_name.replace("\\", "/")))
    return base or "image", ext.lstrip(".").lower()


def extension_for(file_name: str, mime_type: str | None) -> str:
    """Extension from the file name, else from the MIME type, else ``bin``."""
    _, ext = _split_name(file_name)
    if ext:
        return ext
    if mime_type:
        return _MIME_EXTENSIONS.get(mime_type.lower(), "bin")
    return "bin"


class AssetPreprocessor:
    """Applies an ``ImagePolicy`` to raw upload bytes."""

    def __init__(
        self,
        codec: ImageCodec | None = None,
        *,
        max_dimension: int = MAX_DIMENSION,
        jpeg_quality: float = JPEG_QUALITY,
    ):
        if max_dimension < 1:
            raise ValueError("max_dimension must be positive")
        self._codec = codec if codec is not None else PillowCodec()
        self._max_dimension = max_dimension
        self._jpeg_quality = jpeg_quality

    def process(
        self,
        data: bytes,
        policy: ImagePolicy,
        *,
        mime_type: str | None = None,
        file_name: str = "",
    ) -> ProcessedAsset:
        """Produce the asset to upload under the given policy.

        Raises:
            ImageDecodeError: COMPRESS policy and the bytes are not an image.
            ImageEncodeError: COMPRESS policy and JPEG encoding failed.
        """
        if ImagePolicy(policy) is ImagePolicy.COMPRESS:
            return self._compress(data, file_name)
        return self._passthrough(data, mime_type, file_name)

    def _compress(self, data: bytes, file_name: str) -> ProcessedAsset:
        image = self._codec.decode(data)
        width, height = compute_target_size(image.width, image.height, self._max_dimension)
        if (width, height) != (image.width, image.height):
            logger.debug("Resizing %dx%d -> %dx%d", image.width, image.height, width, height)

        encoded = self._codec.encode_jpeg(image, width, height, self._jpeg_quality)
        base, _ = _split_name(file_name)
        return ProcessedAsset(
            data=encoded,
            mime_type=JPEG_MIME_TYPE,
            file_extension="jpg",
            file_name=f"{base}.jpg",
            width=width,
            height=height,
        )

    def _passthrough(self, data: bytes, mime_type: str | None, file_name: str) -> ProcessedAsset:
        if not mime_type:
            mime_type = mimetypes.guess_type(file_name)[0] or DEFAULT_MIME_TYPE
        ext = extension_for(file_name, mime_type)
        base, _ = _split_name(file_name)
        return ProcessedAsset(
            data=bytes(data),
            mime_type=mime_type,
            file_extension=ext,
            file_name=f"{base}.{ext}",
        )


__all__ = [
    "AssetPreprocessor",
    "ImagePolicy",
    "ProcessedAsset",
    "compute_target_size",
    "extension_for",
]
