"""Storage package: object storage abstraction."""

from restaurant_media.storage.contracts import ObjectStorage, UploadError
from restaurant_media.storage.gcs_impl import GcsStorage

__all__ = ["ObjectStorage", "UploadError", "GcsStorage"]
