"""Pytest configuration and fixtures."""

import os

# Keep the app from picking up real credentials BEFORE any app imports
for _var in ("GCS_BUCKET", "GCS_CLIENT_EMAIL", "GCS_PRIVATE_KEY"):
    os.environ.pop(_var, None)

import io
from unittest.mock import AsyncMock, MagicMock

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from PIL import Image

from restaurant_media.auth.signer import ServiceAccountCredential

SERVICE_ACCOUNT_EMAIL = "uploader@example-project.iam.gserviceaccount.com"


@pytest.fixture(scope="session")
def rsa_private_key():
    """RSA key generated once per test session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key):
    """PKCS#8 PEM text, as found in a service-account JSON file."""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def credential(private_key_pem):
    return ServiceAccountCredential(issuer_email=SERVICE_ACCOUNT_EMAIL, private_key_pem=private_key_pem)


def make_image_bytes(width: int, height: int, fmt: str = "JPEG", mode: str = "RGB") -> bytes:
    """Encode a solid-colour image of the given size."""
    color = (200, 80, 40, 128)[: len(mode)] if mode in ("RGB", "RGBA") else 128
    img = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def image_bytes():
    """Factory fixture for encoded test images."""
    return make_image_bytes


@pytest.fixture
def mock_signer():
    """Signer that always returns the same token."""
    signer = MagicMock()
    signer.get_access_token = AsyncMock(return_value="test-token")
    return signer


@pytest.fixture
def mock_uploader():
    """Create a mock upload orchestrator."""
    uploader = MagicMock()
    uploader.upload = AsyncMock()
    uploader.upload_many = AsyncMock()
    return uploader
