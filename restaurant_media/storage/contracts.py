"""Storage interfaces and error types."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


class UploadError(Exception):
    """Wraps storage failures with operation context and the upstream response."""

    def __init__(
        self,
        op: str,
        bucket: str | None,
        key: str | None,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ):
        self.op = op
        self.bucket = bucket
        self.key = key
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(self.__str__())

    def __str__(self) -> str:
        bucket_repr = self.bucket or "<unknown>"
        key_repr = self.key or "<unknown>"
        return f"{self.op} failed for bucket={bucket_repr} key={key_repr}: {self.message}"


@runtime_checkable
class ObjectStorage(Protocol):
    """Contract for bearer-authenticated object storage."""

    @property
    def bucket(self) -> str:
        ...

    async def put_bytes(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str,
        access_token: str,
    ) -> str:
        ...

    def public_url(self, object_name: str) -> str:
        ...


__all__ = ["UploadError", "ObjectStorage"]
