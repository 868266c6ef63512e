"""Service-account token signing for Google Cloud Storage.

Builds an RS256-signed JWT assertion from the service-account key and
exchanges it at the OAuth token endpoint for a short-lived bearer token.
Tokens are cached in a ``TokenCache`` owned by the signer and reused until
they come within ``REFRESH_MARGIN_S`` seconds of expiry.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

import httpx
import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"
STORAGE_READ_WRITE_SCOPE = "https://www.googleapis.com/auth/devstorage.read_write"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"

ASSERTION_LIFETIME_S = 3600
REFRESH_MARGIN_S = 60


class AuthError(Exception):
    """Raised when a key cannot be used or the token exchange fails."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True, slots=True)
class ServiceAccountCredential:
    """Issuer email and PEM private key of a service account."""

    issuer_email: str
    private_key_pem: str

    def __repr__(self) -> str:
        return f"ServiceAccountCredential(issuer_email={self.issuer_email!r})"


@dataclass(frozen=True, slots=True)
class CachedToken:
    """Access token together with its absolute expiry (epoch seconds)."""

    value: str
    expires_at: float

    def usable_at(self, now: float, margin: float = REFRESH_MARGIN_S) -> bool:
        # Inclusive: a token expiring exactly `margin` seconds from now is still reused
        return now + margin <= self.expires_at


class TokenCache:
    """Holds at most one token; refreshes replace it wholesale."""

    def __init__(self) -> None:
        self._token: CachedToken | None = None

    @property
    def token(self) -> CachedToken | None:
        return self._token

    def get(self, now: float, margin: float = REFRESH_MARGIN_S) -> str | None:
        token = self._token
        if token is not None and token.usable_at(now, margin):
            return token.value
        return None

    def replace(self, token: CachedToken) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


def _load_private_key(pem: str) -> rsa.RSAPrivateKey:
    """Load an unencrypted PKCS#8 (or PKCS#1) RSA key from PEM text."""
    try:
        key = serialization.load_pem_private_key(pem.encode("utf-8"), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise AuthError(f"Invalid service account private key: {exc}") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise AuthError("Service account private key must be an RSA key")
    return key


def sign_assertion(
    credential: ServiceAccountCredential,
    *,
    audience: str,
    scope: str,
    issued_at: int,
    lifetime_s: int = ASSERTION_LIFETIME_S,
) -> str:
    """Return a compact RS256 JWT asserting the service account identity.

    Raises:
        AuthError: The key is malformed, not RSA, or signing fails.
    """
    key = _load_private_key(credential.private_key_pem)

    claims = {
        "iss": credential.issuer_email,
        "sub": credential.issuer_email,
        "aud": audience,
        "scope": scope,
        "iat": issued_at,
        "exp": issued_at + lifetime_s,
    }
    try:
        return jwt.encode(claims, key, algorithm="RS256", headers={"typ": "JWT"})
    except (jwt.PyJWTError, ValueError, TypeError) as exc:
        raise AuthError(f"Failed to sign assertion: {exc}") from exc


class CredentialSigner:
    """Issues bearer tokens for a service account, caching them between calls."""

    def __init__(
        self,
        credential: ServiceAccountCredential,
        client: httpx.AsyncClient,
        *,
        token_uri: str = DEFAULT_TOKEN_URI,
        scope: str = STORAGE_READ_WRITE_SCOPE,
        cache: TokenCache | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._credential = credential
        self._client = client
        self._token_uri = token_uri
        self._scope = scope
        self._cache = cache if cache is not None else TokenCache()
        self._clock = clock

    @property
    def cache(self) -> TokenCache:
        return self._cache

    def invalidate(self) -> None:
        """Drop the cached token so the next call performs a fresh exchange."""
        self._cache.clear()

    async def get_access_token(self) -> str:
        """Return a bearer token, exchanging a new assertion when needed.

        Raises:
            AuthError: Signing failed or the token endpoint rejected the request.
        """
        now = int(self._clock())

        cached = self._cache.get(now)
        if cached is not None:
            logger.debug("Reusing cached access token for %s", self._credential.issuer_email)
            return cached

        assertion = sign_assertion(
            self._credential,
            audience=self._token_uri,
            scope=self._scope,
            issued_at=now,
        )
        token = await self._exchange(assertion, now)

        self._cache.replace(token)
        logger.info(
            "Issued access token for %s (expires in %ds)",
            self._credential.issuer_email,
            token.expires_at - now,
        )
        return token.value

    async def _exchange(self, assertion: str, now: int) -> CachedToken:
        try:
            response = await self._client.post(
                self._token_uri,
                data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.RequestError as exc:
            raise AuthError(f"Token request failed: {exc}") from exc

        if not response.is_success:
            logger.warning("Token exchange rejected with HTTP %d", response.status_code)
            raise AuthError(
                f"Token exchange failed ({response.status_code}): {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise AuthError("Token response is not valid JSON", body=response.text) from exc
        if not isinstance(payload, dict):
            raise AuthError("Token response is not a JSON object", body=response.text)

        access_token = payload.get("access_token")
        expires_in = payload.get("expires_in")
        if not isinstance(access_token, str) or not access_token:
            raise AuthError("Token response has no access_token", body=response.text)
        if not isinstance(expires_in, int) or isinstance(expires_in, bool) or expires_in <= 0:
            raise AuthError("Token response has no valid expires_in", body=response.text)
        return CachedToken(value=access_token, expires_at=now + expires_in)


__all__ = [
    "AuthError",
    "CachedToken",
    "CredentialSigner",
    "ServiceAccountCredential",
    "TokenCache",
    "sign_assertion",
]
