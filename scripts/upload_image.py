#!/usr/bin/env python3
"""
Upload local restaurant images straight to Google Cloud Storage.

Prerequisites:
    GCS_BUCKET, GCS_CLIENT_EMAIL and GCS_PRIVATE_KEY set in the environment or .env

Usage:
    python scripts/upload_image.py photo.jpg

    # Several images, uploaded in order (main image first):
    python scripts/upload_image.py main.png extra1.jpg extra2.jpg

    # Keep the original bytes instead of re-encoding to JPEG:
    python scripts/upload_image.py photo.webp --policy passthrough

    # Output raw JSON:
    python scripts/upload_image.py photo.jpg --json
"""

import argparse
import asyncio
import json
import mimetypes
import sys
from pathlib import Path

from restaurant_media.auth.signer import AuthError
from restaurant_media.core.config import settings
from restaurant_media.core.logging import setup_logging
from restaurant_media.schemas.domain import UploadRequest, UploadResult
from restaurant_media.services.image_codec import ImageProcessingError
from restaurant_media.services.preprocessor import ImagePolicy
from restaurant_media.storage.contracts import UploadError
from restaurant_media.storage.factory import build_http_client, build_uploader


def load_request(path: Path) -> UploadRequest:
    """Read a local file into an upload request."""
    return UploadRequest(
        data=path.read_bytes(),
        declared_mime_type=mimetypes.guess_type(path.name)[0],
        original_file_name=path.name,
    )


async def upload_all(paths: list[Path], policy: ImagePolicy | None) -> list[UploadResult]:
    """Upload files in order, stopping at the first failure."""
    async with build_http_client(settings) as client:
        uploader = build_uploader(settings, client)
        return await uploader.upload_many([load_request(p) for p in paths], policy)


def main():
    parser = argparse.ArgumentParser(description="Upload restaurant images to GCS")
    parser.add_argument("files", nargs="+", type=Path, help="Image files to upload")
    parser.add_argument(
        "--policy",
        choices=[p.value for p in ImagePolicy],
        help=f"Preprocessing policy (default: {settings.IMAGE_POLICY.value})",
    )
    parser.add_argument("--json", action="store_true", help="Output raw JSON")
    args = parser.parse_args()

    setup_logging("WARNING" if args.json else None)

    missing = [p for p in args.files if not p.exists()]
    if missing:
        print(f"Error: file not found: {', '.join(str(p) for p in missing)}")
        sys.exit(1)

    if not settings.storage_configured:
        print("Error: GCS_BUCKET, GCS_CLIENT_EMAIL and GCS_PRIVATE_KEY must be set")
        sys.exit(1)

    policy = ImagePolicy(args.policy) if args.policy else None
    try:
        results = asyncio.run(upload_all(args.files, policy))
    except (AuthError, UploadError, ImageProcessingError) as e:
        print(f"Error uploading: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps([r.model_dump() for r in results], indent=2))
        return

    for path, result in zip(args.files, results):
        print(f"{path.name}")
        print(f"  Object: {result.object_name}")
        print(f"  URL:    {result.public_url}")


if __name__ == "__main__":
    main()
