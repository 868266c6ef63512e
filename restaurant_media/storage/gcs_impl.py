"""Google Cloud Storage JSON API implementation of the storage interfaces."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from restaurant_media.storage.contracts import ObjectStorage, UploadError

logger = logging.getLogger(__name__)

GCS_BASE_URL = "https://storage.googleapis.com"


class GcsStorage(ObjectStorage):
    """Single-request media uploads to a GCS bucket over httpx."""

    def __init__(self, client: httpx.AsyncClient, bucket: str, *, base_url: str = GCS_BASE_URL):
        if not bucket:
            raise ValueError("bucket must not be empty")
        self._client = client
        self._bucket = bucket
        self._base_url = base_url.rstrip("/")

    @property
    def bucket(self) -> str:
        return self._bucket

    def upload_url(self, key: str) -> str:
        return (
            f"{self._base_url}/upload/storage/v1/b/{quote(self._bucket, safe='')}/o"
            f"?uploadType=media&name={quote(key, safe='')}"
        )

    def public_url(self, object_name: str) -> str:
        return f"{self._base_url}/{self._bucket}/{quote(object_name, safe='/')}"

    async def put_bytes(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str,
        access_token: str,
    ) -> str:
        """Upload ``data`` under ``key`` and return the stored object name.

        Raises:
            UploadError: Transport failure, non-2xx status, or unreadable response.
        """
        try:
            response = await self._client.post(
                self.upload_url(key),
                content=data,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Content-Type": content_type,
                },
            )
        except httpx.RequestError as exc:
            raise UploadError("put", self._bucket, key, str(exc)) from exc

        if not response.is_success:
            logger.warning("Upload of %s rejected with HTTP %d", key, response.status_code)
            raise UploadError(
                "put",
                self._bucket,
                key,
                f"HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            name = response.json()["name"]
        except (ValueError, KeyError, TypeError) as exc:
            raise UploadError(
                "put",
                self._bucket,
                key,
                f"unexpected upload response: {response.text}",
                status_code=response.status_code,
                body=response.text,
            ) from exc
        return str(name)


__all__ = ["GCS_BASE_URL", "GcsStorage"]
