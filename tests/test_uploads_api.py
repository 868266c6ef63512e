"""Tests for POST /api/uploads/images endpoints."""

import io
from unittest.mock import patch

from fastapi.testclient import TestClient

from restaurant_media.auth.signer import AuthError
from restaurant_media.main import app
from restaurant_media.schemas.domain import UploadResult
from restaurant_media.services.image_codec import ImageDecodeError, ImageEncodeError
from restaurant_media.services.preprocessor import ImagePolicy
from restaurant_media.storage.contracts import UploadError

RESULT = UploadResult(
    public_url="https://storage.googleapis.com/pick-bucket/restaurants/1_abcdef.jpg",
    object_name="restaurants/1_abcdef.jpg",
)


def _file(name="dish.png", content=b"\x89PNG fake", content_type="image/png"):
    return (name, io.BytesIO(content), content_type)


class TestUploadImageEndpoint:
    """Tests for POST /api/uploads/images."""

    def test_upload_happy_path(self, mock_uploader):
        """Valid image upload returns the public URL and object name."""
        mock_uploader.upload.return_value = RESULT

        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.uploader = mock_uploader
            response = client.post("/api/uploads/images", files={"file": _file()})

        assert response.status_code == 200
        assert response.json() == RESULT.model_dump()

        request, policy = mock_uploader.upload.await_args.args
        assert request.data == b"\x89PNG fake"
        assert request.declared_mime_type == "image/png"
        assert request.original_file_name == "dish.png"
        assert policy is None

    def test_policy_query_parameter(self, mock_uploader):
        mock_uploader.upload.return_value = RESULT

        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.uploader = mock_uploader
            response = client.post("/api/uploads/images?policy=passthrough", files={"file": _file()})

        assert response.status_code == 200
        assert mock_uploader.upload.await_args.args[1] is ImagePolicy.PASSTHROUGH

    def test_invalid_policy_returns_422(self, mock_uploader):
        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.uploader = mock_uploader
            response = client.post("/api/uploads/images?policy=shrink", files={"file": _file()})

        assert response.status_code == 422

    def test_non_image_returns_400(self, mock_uploader):
        """Non-image content type returns 400 error."""
        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.uploader = mock_uploader
            response = client.post(
                "/api/uploads/images", files={"file": _file("menu.pdf", b"%PDF", "application/pdf")}
            )

        assert response.status_code == 400
        assert "Only image files supported" in response.json()["detail"]
        mock_uploader.upload.assert_not_awaited()

    def test_oversize_file_returns_413(self, mock_uploader):
        """File exceeding size limit returns 413 error."""
        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.uploader = mock_uploader

            with patch("restaurant_media.routes.uploads.settings") as mock_settings:
                mock_settings.MAX_FILE_SIZE_MB = 1  # 1 MB limit

                large_content = b"X" * (2 * 1024 * 1024)  # 2 MB
                response = client.post(
                    "/api/uploads/images", files={"file": _file(content=large_content)}
                )

        assert response.status_code == 413
        assert "exceeds" in response.json()["detail"]

    def test_uploader_unavailable_returns_503(self):
        """Returns 503 when storage credentials are not configured."""
        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.uploader = None
            response = client.post("/api/uploads/images", files={"file": _file()})

        assert response.status_code == 503
        assert "unavailable" in response.json()["detail"]

    def test_decode_error_returns_422(self, mock_uploader):
        mock_uploader.upload.side_effect = ImageDecodeError("Cannot decode image: bad header")

        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.uploader = mock_uploader
            response = client.post("/api/uploads/images", files={"file": _file()})

        assert response.status_code == 422
        assert "Cannot decode image" in response.json()["detail"]

    def test_encode_error_returns_500(self, mock_uploader):
        mock_uploader.upload.side_effect = ImageEncodeError("Cannot encode JPEG")

        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.uploader = mock_uploader
            response = client.post("/api/uploads/images", files={"file": _file()})

        assert response.status_code == 500

    def test_storage_error_returns_502_with_upstream_body(self, mock_uploader):
        mock_uploader.upload.side_effect = UploadError(
            "put", "pick-bucket", "k.jpg", "HTTP 403: insufficient permission", status_code=403
        )

        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.uploader = mock_uploader
            response = client.post("/api/uploads/images", files={"file": _file()})

        assert response.status_code == 502
        assert "insufficient permission" in response.json()["detail"]

    def test_auth_error_returns_502(self, mock_uploader):
        mock_uploader.upload.side_effect = AuthError("Token exchange failed (400): invalid_grant")

        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.uploader = mock_uploader
            response = client.post("/api/uploads/images", files={"file": _file()})

        assert response.status_code == 502
        assert "invalid_grant" in response.json()["detail"]


class TestBatchUploadEndpoint:
    """Tests for POST /api/uploads/images/batch."""

    def test_batch_happy_path(self, mock_uploader):
        second = UploadResult(public_url="https://x/b", object_name="restaurants/b.jpg")
        mock_uploader.upload_many.return_value = [RESULT, second]

        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.uploader = mock_uploader
            response = client.post(
                "/api/uploads/images/batch",
                files=[("files", _file("main.png")), ("files", _file("extra.jpg", b"jpg", "image/jpeg"))],
            )

        assert response.status_code == 200
        assert response.json() == {"items": [RESULT.model_dump(), second.model_dump()]}
        requests, _ = mock_uploader.upload_many.await_args.args
        assert [r.original_file_name for r in requests] == ["main.png", "extra.jpg"]

    def test_too_many_files_returns_400(self, mock_uploader):
        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.uploader = mock_uploader
            response = client.post(
                "/api/uploads/images/batch",
                files=[("files", _file(f"{i}.png")) for i in range(5)],
            )

        assert response.status_code == 400
        mock_uploader.upload_many.assert_not_awaited()

    def test_batch_failure_maps_error(self, mock_uploader):
        mock_uploader.upload_many.side_effect = UploadError("put", "b", "k", "HTTP 500: backend error")

        with TestClient(app, raise_server_exceptions=False) as client:
            app.state.uploader = mock_uploader
            response = client.post("/api/uploads/images/batch", files=[("files", _file())])

        assert response.status_code == 502
