"""Auth package: service-account token signing and caching."""

from restaurant_media.auth.signer import (
    AuthError,
    CachedToken,
    CredentialSigner,
    ServiceAccountCredential,
    TokenCache,
    sign_assertion,
)

__all__ = [
    "AuthError",
    "CachedToken",
    "CredentialSigner",
    "ServiceAccountCredential",
    "TokenCache",
    "sign_assertion",
]
