"""Upload services: preprocessing, key generation, orchestration."""

from restaurant_media.services.image_codec import (
    DecodedImage,
    ImageCodec,
    ImageDecodeError,
    ImageEncodeError,
    ImageProcessingError,
    PillowCodec,
)
from restaurant_media.services.object_keys import ObjectKeyFactory
from restaurant_media.services.preprocessor import (
    AssetPreprocessor,
    ImagePolicy,
    ProcessedAsset,
    compute_target_size,
)
from restaurant_media.services.uploader import UploadOrchestrator

__all__ = [
    "AssetPreprocessor",
    "DecodedImage",
    "ImageCodec",
    "ImageDecodeError",
    "ImageEncodeError",
    "ImagePolicy",
    "ImageProcessingError",
    "ObjectKeyFactory",
    "PillowCodec",
    "ProcessedAsset",
    "UploadOrchestrator",
    "compute_target_size",
]
