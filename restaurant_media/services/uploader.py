"""Upload orchestration: preprocess, authenticate, store, publish.

Every call is a single attempt. Errors from any step propagate unchanged:

- ``ImageDecodeError`` / ``ImageEncodeError`` from preprocessing
- ``AuthError`` from the credential signer
- ``UploadError`` from storage
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from restaurant_media.schemas.domain import UploadRequest, UploadResult
from restaurant_media.services.object_keys import ObjectKeyFactory
from restaurant_media.services.preprocessor import AssetPreprocessor, ImagePolicy

if TYPE_CHECKING:
    from restaurant_media.auth.signer import CredentialSigner
    from restaurant_media.storage.contracts import ObjectStorage

logger = logging.getLogger(__name__)


class UploadOrchestrator:
    """Turns raw image bytes into a public object-storage URL."""

    def __init__(
        self,
        *,
        signer: "CredentialSigner",
        storage: "ObjectStorage",
        preprocessor: AssetPreprocessor,
        keys: ObjectKeyFactory,
        policy: ImagePolicy,
    ):
        self._signer = signer
        self._storage = storage
        self._preprocessor = preprocessor
        self._keys = keys
        self._policy = ImagePolicy(policy)

    @property
    def policy(self) -> ImagePolicy:
        return self._policy

    async def upload(self, request: UploadRequest, policy: ImagePolicy | None = None) -> UploadResult:
        """Upload one file and return its public URL.

        Args:
            request: Raw bytes with the caller's MIME type and file name.
            policy: Overrides the policy chosen at construction.
        """
        effective = ImagePolicy(policy) if policy is not None else self._policy

        asset = self._preprocessor.process(
            request.data,
            effective,
            mime_type=request.declared_mime_type,
            file_name=request.original_file_name,
        )
        token = await self._signer.get_access_token()
        key = self._keys.new_key(asset.file_extension)

        object_name = await self._storage.put_bytes(
            key,
            asset.data,
            content_type=asset.mime_type,
            access_token=token,
        )
        result = UploadResult(
            public_url=self._storage.public_url(object_name),
            object_name=object_name,
        )
        logger.info(
            "Uploaded %s as %s (%s, %d bytes, policy=%s)",
            request.original_file_name or "<unnamed>",
            object_name,
            asset.mime_type,
            len(asset.data),
            effective.value,
        )
        return result

    async def upload_many(
        self,
        requests: Iterable[UploadRequest],
        policy: ImagePolicy | None = None,
    ) -> list[UploadResult]:
        """Upload files one after another, stopping at the first failure.

        Objects stored before the failure are left in the bucket.
        """
        results: list[UploadResult] = []
        for request in requests:
            results.append(await self.upload(request, policy))
        return results


__all__ = ["UploadOrchestrator"]
