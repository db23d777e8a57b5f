"""
Salon Backend — Media Service Unit Tests
==========================================

What:  Tests for photo validation, URL extraction and both upload backends.
How:   Cloudinary calls go through httpx.MockTransport; the local backend
       writes into pytest's tmp_path.

What we test:
    ✅ Extension, size and content type validation (before any upload)
    ✅ URL preference order: path → secure_url → url → ""
    ✅ Cloudinary request signing, destroy and error mapping
    ✅ Local storage layout and removal
    ✅ discard_photo is best-effort
"""

import hashlib
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.exceptions import MediaUploadError, ValidationError
from app.schemas.stylist import PhotoUpload
from app.services.media_service import (
    ALLOWED_FORMATS,
    CloudinaryBackend,
    LocalBackend,
    MediaService,
    UploadResult,
    extract_photo_url,
)


def cloudinary_settings():
    mock_settings = MagicMock()
    mock_settings.cloudinary_configured = True
    mock_settings.cloudinary_cloud_name = "salon"
    mock_settings.cloudinary_api_key = "key-123"
    mock_settings.cloudinary_api_secret = "shh"
    mock_settings.cloudinary_upload_url = "https://api.cloudinary.com/v1_1"
    mock_settings.http_timeout = 5.0
    return mock_settings


class TestExtractPhotoUrl:

    def test_prefers_path(self):
        result = UploadResult(path="p", secure_url="s", url="u")
        assert extract_photo_url(result) == "p"

    def test_then_secure_url(self):
        result = UploadResult(secure_url="https://cdn/x.jpg", url="http://cdn/x.jpg")
        assert extract_photo_url(result) == "https://cdn/x.jpg"

    def test_then_url(self):
        assert extract_photo_url(UploadResult(path="", url="http://cdn/x.jpg")) == "http://cdn/x.jpg"

    def test_nothing_usable(self):
        assert extract_photo_url(UploadResult(public_id="stylists/x")) == ""
        assert extract_photo_url(None) == ""


class TestValidation:

    def setup_method(self):
        self.service = MediaService(backend=MagicMock())

    @pytest.mark.parametrize("filename", ["a.jpg", "b.JPEG", "c.png", "d.webp"])
    def test_allowed_extensions(self, filename):
        assert self.service.validate_extension(filename) in ALLOWED_FORMATS

    @pytest.mark.parametrize("filename", ["a.gif", "b.pdf", "noext"])
    def test_rejected_extensions(self, filename):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_extension(filename)
        assert exc_info.value.field == "photo"

    def test_oversized_photo(self):
        with patch('app.services.media_service.settings') as mock_settings:
            mock_settings.max_file_size = 1024
            with pytest.raises(ValidationError, match="exceeds maximum"):
                self.service.validate_size(2048)

    @pytest.mark.asyncio
    async def test_rejected_photo_never_uploaded(self):
        backend = MagicMock()
        backend.store = AsyncMock()
        service = MediaService(backend=backend)

        with pytest.raises(ValidationError):
            await service.store_photo(PhotoUpload(filename="cv.pdf", content=b"%PDF"))

        backend.store.assert_not_awaited()

    def test_detects_real_jpeg(self, sample_image_bytes):
        assert self.service.validate_mime_type(sample_image_bytes, "a.jpg") == "image/jpeg"

    @pytest.mark.asyncio
    async def test_renamed_html_never_uploaded(self):
        backend = MagicMock()
        backend.store = AsyncMock()
        service = MediaService(backend=backend)
        disguised = PhotoUpload(
            filename="portrait.jpg",
            content=b"<html><body><script>alert(1)</script></body></html>",
        )

        with pytest.raises(ValidationError) as exc_info:
            await service.store_photo(disguised)

        assert exc_info.value.field == "photo"
        assert not exc_info.value.context["detected_mime"].startswith("image/")
        backend.store.assert_not_awaited()


class TestStorePhoto:

    @pytest.mark.asyncio
    async def test_returns_extracted_url(self, sample_image_bytes):
        backend = MagicMock()
        backend.store = AsyncMock(return_value=UploadResult(secure_url="https://cdn/a.jpg"))
        service = MediaService(backend=backend)

        result = await service.store_photo(PhotoUpload(filename="a.jpg", content=sample_image_bytes))

        assert result.photo_url == "https://cdn/a.jpg"
        kwargs = backend.store.await_args.kwargs
        assert kwargs["folder"] == "stylists"
        assert tuple(kwargs["allowed_formats"]) == ("jpg", "png", "jpeg", "webp")

    @pytest.mark.asyncio
    async def test_no_url_yields_empty_string(self, sample_image_bytes):
        backend = MagicMock()
        backend.store = AsyncMock(return_value=UploadResult())
        service = MediaService(backend=backend)

        result = await service.store_photo(PhotoUpload(filename="a.jpg", content=sample_image_bytes))

        assert result.photo_url == ""

    @pytest.mark.asyncio
    async def test_unexpected_backend_error_wrapped(self, sample_image_bytes):
        backend = MagicMock()
        backend.store = AsyncMock(side_effect=RuntimeError("socket closed"))
        service = MediaService(backend=backend)

        with pytest.raises(MediaUploadError) as exc_info:
            await service.store_photo(PhotoUpload(filename="a.jpg", content=sample_image_bytes))

        assert exc_info.value.context["error"] == "socket closed"


class TestCloudinaryBackend:

    def test_signature(self):
        params = {"timestamp": "100", "folder": "stylists", "allowed_formats": "jpg,png"}
        expected = hashlib.sha1(
            b"allowed_formats=jpg,png&folder=stylists&timestamp=100shh"
        ).hexdigest()

        assert CloudinaryBackend.sign(params, "shh") == expected

    @pytest.mark.asyncio
    async def test_successful_upload(self, sample_image_bytes):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return httpx.Response(
                200,
                json={
                    "public_id": "stylists/abc",
                    "secure_url": "https://res.cloudinary.com/salon/image/upload/stylists/abc.jpg",
                    "url": "http://res.cloudinary.com/salon/image/upload/stylists/abc.jpg",
                },
            )

        backend = CloudinaryBackend(transport=httpx.MockTransport(handler))
        with patch('app.services.media_service.settings', cloudinary_settings()):
            result = await backend.store(sample_image_bytes, "a.jpg", "stylists", ALLOWED_FORMATS)

        assert seen["url"] == "https://api.cloudinary.com/v1_1/salon/image/upload"
        assert b'name="signature"' in seen["body"]
        assert b"key-123" in seen["body"]
        assert extract_photo_url(result).startswith("https://res.cloudinary.com/")

    @pytest.mark.asyncio
    async def test_rejected_upload(self, sample_image_bytes):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": {"message": "Image format not allowed"}})

        backend = CloudinaryBackend(transport=httpx.MockTransport(handler))
        with patch('app.services.media_service.settings', cloudinary_settings()):
            with pytest.raises(MediaUploadError) as exc_info:
                await backend.store(sample_image_bytes, "a.jpg", "stylists", ALLOWED_FORMATS)

        assert exc_info.value.context["error"] == "Image format not allowed"
        assert exc_info.value.context["status_code"] == 400

    @pytest.mark.asyncio
    async def test_network_failure(self, sample_image_bytes):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        backend = CloudinaryBackend(transport=httpx.MockTransport(handler))
        with patch('app.services.media_service.settings', cloudinary_settings()):
            with pytest.raises(MediaUploadError):
                await backend.store(sample_image_bytes, "a.jpg", "stylists", ALLOWED_FORMATS)

    @pytest.mark.asyncio
    async def test_unconfigured(self, sample_image_bytes):
        mock_settings = cloudinary_settings()
        mock_settings.cloudinary_configured = False
        with patch('app.services.media_service.settings', mock_settings):
            with pytest.raises(MediaUploadError, match="not configured"):
                await CloudinaryBackend().store(sample_image_bytes, "a.jpg", "stylists", ALLOWED_FORMATS)

    @pytest.mark.asyncio
    async def test_delete_calls_destroy(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["form"] = dict(httpx.QueryParams(request.content.decode()))
            return httpx.Response(200, json={"result": "ok"})

        backend = CloudinaryBackend(transport=httpx.MockTransport(handler))
        with patch('app.services.media_service.settings', cloudinary_settings()):
            await backend.delete("stylists/abc")

        assert seen["url"] == "https://api.cloudinary.com/v1_1/salon/image/destroy"
        assert seen["form"]["public_id"] == "stylists/abc"
        assert seen["form"]["signature"] == CloudinaryBackend.sign(
            {"public_id": "stylists/abc", "timestamp": seen["form"]["timestamp"]}, "shh"
        )


class TestLocalBackend:

    @pytest.mark.asyncio
    async def test_writes_under_folder(self, tmp_path, sample_image_bytes):
        backend = LocalBackend(storage_root=str(tmp_path))

        result = await backend.store(sample_image_bytes, "Ada.PNG", "stylists", ALLOWED_FORMATS)

        assert result.url.startswith("/api/files/stylists/")
        assert result.url.endswith(".png")
        stored = tmp_path / result.public_id
        assert stored.read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_disallowed_format(self, tmp_path):
        backend = LocalBackend(storage_root=str(tmp_path))

        with pytest.raises(MediaUploadError):
            await backend.store(b"GIF89a", "a.gif", "stylists", ALLOWED_FORMATS)

    @pytest.mark.asyncio
    async def test_delete_removes_file(self, tmp_path, sample_image_bytes):
        backend = LocalBackend(storage_root=str(tmp_path))
        result = await backend.store(sample_image_bytes, "a.jpg", "stylists", ALLOWED_FORMATS)

        await backend.delete(result.public_id)

        assert not (tmp_path / result.public_id).exists()
        # Already gone is fine
        await backend.delete(result.public_id)

    @pytest.mark.asyncio
    async def test_delete_refuses_paths_outside_root(self, tmp_path):
        backend = LocalBackend(storage_root=str(tmp_path / "storage"))

        with pytest.raises(MediaUploadError):
            await backend.delete("../outside.jpg")


class TestDiscardPhoto:

    @pytest.mark.asyncio
    async def test_deletes_by_public_id(self):
        backend = MagicMock()
        backend.delete = AsyncMock()
        service = MediaService(backend=backend)

        await service.discard_photo(UploadResult(url="/api/files/stylists/a.jpg", public_id="stylists/a.jpg"))

        backend.delete.assert_awaited_once_with("stylists/a.jpg")

    @pytest.mark.asyncio
    async def test_backend_failure_swallowed(self):
        backend = MagicMock()
        backend.delete = AsyncMock(side_effect=MediaUploadError(message="Photo removal failed"))
        service = MediaService(backend=backend)

        await service.discard_photo(UploadResult(public_id="stylists/a.jpg"))

        backend.delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_nothing_to_discard(self):
        backend = MagicMock()
        backend.delete = AsyncMock()
        service = MediaService(backend=backend)

        await service.discard_photo(None)
        await service.discard_photo(UploadResult(url="https://cdn/a.jpg"))

        backend.delete.assert_not_awaited()
