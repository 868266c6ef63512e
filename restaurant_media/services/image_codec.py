"""Image decode/encode capability and its Pillow implementation."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from PIL import Image, ImageOps, UnidentifiedImageError


class ImageProcessingError(Exception):
    """Base class for image preprocessing failures."""

    pass


class ImageDecodeError(ImageProcessingError):
    """Source bytes could not be decoded as an image."""

    pass


class ImageEncodeError(ImageProcessingError):
    """Decoded image could not be re-encoded."""

    pass


@dataclass(frozen=True, slots=True)
class DecodedImage:
    """Decoded image; ``pixels`` is owned by the codec that produced it."""

    width: int
    height: int
    pixels: Any


@runtime_checkable
class ImageCodec(Protocol):
    """Contract for image decode/encode backends."""

    def decode(self, data: bytes) -> DecodedImage:
        ...

    def encode_jpeg(self, image: DecodedImage, width: int, height: int, quality: float) -> bytes:
        ...


class PillowCodec(ImageCodec):
    """Pillow-backed codec.

    Decoding applies the EXIF orientation tag so the pixels are upright.
    Encoding resamples to the requested size and flattens to RGB.
    """

    def decode(self, data: bytes) -> DecodedImage:
        if not data:
            raise ImageDecodeError("Image data is empty")
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                upright = ImageOps.exif_transpose(img)
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
            raise ImageDecodeError(f"Cannot decode image: {exc}") from exc
        width, height = upright.size
        return DecodedImage(width=width, height=height, pixels=upright)

    def encode_jpeg(self, image: DecodedImage, width: int, height: int, quality: float) -> bytes:
        if not 0.0 < quality <= 1.0:
            raise ImageEncodeError(f"JPEG quality must be in (0, 1], got {quality}")
        try:
            img = _to_rgb(image.pixels)
            if img.size != (width, height):
                img = img.resize((width, height), Image.Resampling.LANCZOS)
            buffer = io.BytesIO()
            img.save(buffer, format="JPEG", quality=round(quality * 100), optimize=True)
        except (OSError, ValueError) as exc:
            raise ImageEncodeError(f"Cannot encode JPEG: {exc}") from exc
        return buffer.getvalue()


def _to_rgb(img: Image.Image) -> Image.Image:
    """Flatten transparency onto white and convert to RGB for JPEG."""
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if img.mode != "RGB":
        return img.convert("RGB")
    return img


__all__ = [
    "DecodedImage",
    "ImageCodec",
    "ImageDecodeError",
    "ImageEncodeError",
    "ImageProcessingError",
    "PillowCodec",
]
