"""Factory for building the upload pipeline from configuration."""

from __future__ import annotations

import httpx

from restaurant_media.auth.signer import CredentialSigner, ServiceAccountCredential
from restaurant_media.core.config import Settings
from restaurant_media.services.object_keys import ObjectKeyFactory
from restaurant_media.services.preprocessor import AssetPreprocessor
from restaurant_media.services.uploader import UploadOrchestrator
from restaurant_media.storage.gcs_impl import GcsStorage


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared async HTTP client for token exchange and uploads."""
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_S)


def build_uploader(settings: Settings, client: httpx.AsyncClient) -> UploadOrchestrator:
    """Wire signer, preprocessor, key factory and storage into an orchestrator.

    Settings consulted:
        GCS_BUCKET, GCS_CLIENT_EMAIL, GCS_PRIVATE_KEY: required.
        GCS_TOKEN_URI, GCS_SCOPE: token exchange endpoint and scope.
        UPLOAD_PREFIX, OBJECT_SUFFIX_ALPHABET, OBJECT_SUFFIX_LENGTH: object keys.
        IMAGE_POLICY, IMAGE_MAX_DIM, JPEG_QUALITY: preprocessing.

    Raises:
        ValueError: A required storage setting is missing.
    """
    if not settings.storage_configured:
        raise ValueError("GCS_BUCKET, GCS_CLIENT_EMAIL and GCS_PRIVATE_KEY must be set")

    credential = ServiceAccountCredential(
        issuer_email=settings.GCS_CLIENT_EMAIL,
        private_key_pem=settings.GCS_PRIVATE_KEY,
    )
    signer = CredentialSigner(
        credential,
        client,
        token_uri=settings.GCS_TOKEN_URI,
        scope=settings.GCS_SCOPE,
    )
    keys = ObjectKeyFactory(
        settings.UPLOAD_PREFIX,
        alphabet=settings.OBJECT_SUFFIX_ALPHABET,
        suffix_length=settings.OBJECT_SUFFIX_LENGTH,
    )
    preprocessor = AssetPreprocessor(
        max_dimension=settings.IMAGE_MAX_DIM,
        jpeg_quality=settings.JPEG_QUALITY,
    )
    return UploadOrchestrator(
        signer=signer,
        storage=GcsStorage(client, settings.GCS_BUCKET),
        preprocessor=preprocessor,
        keys=keys,
        policy=settings.IMAGE_POLICY,
    )


__all__ = ["build_http_client", "build_uploader"]
