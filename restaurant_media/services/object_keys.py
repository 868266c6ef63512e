"""Object key generation: ``<prefix>/<unixMillis>_<suffix>.<ext>``."""

from __future__ import annotations

import secrets
import string
import time
from typing import Callable

BASE36_ALPHABET = string.digits + string.ascii_lowercase
DEFAULT_PREFIX = "restaurants"
DEFAULT_SUFFIX_LENGTH = 6


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


class ObjectKeyFactory:
    """Builds practically-unique object keys without coordination.

    Uniqueness relies on the millisecond timestamp plus a random suffix;
    collisions are not detected.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        *,
        alphabet: str = BASE36_ALPHABET,
        suffix_length: int = DEFAULT_SUFFIX_LENGTH,
        clock_ms: Callable[[], int] = _now_millis,
        choice: Callable[[str], str] = secrets.choice,
    ):
        if len(set(alphabet)) < 2:
            raise ValueError("alphabet needs at least two distinct characters")
        if suffix_length < 1:
            raise ValueError("suffix_length must be positive")
        self._prefix = prefix.strip("/")
        self._alphabet = alphabet
        self._suffix_length = suffix_length
        self._clock_ms = clock_ms
        self._choice = choice

    @property
    def prefix(self) -> str:
        return self._prefix

    def new_key(self, extension: str) -> str:
        ext = extension.lstrip(".").lower()
        suffix = "".join(self._choice(self._alphabet) for _ in range(self._suffix_length))
        name = f"{self._clock_ms()}_{suffix}"
        if ext:
            name = f"{name}.{ext}"
        return f"{self._prefix}/{name}" if self._prefix else name


__all__ = ["BASE36_ALPHABET", "ObjectKeyFactory"]
