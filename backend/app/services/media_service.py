"""
Salon Backend — Media Upload Service
======================================

What:  Validates an attached stylist photo and uploads it to the media host.
Why:   Keeps upload details (signing, folders, URL extraction) out of the
       stylist workflow, which only needs "bytes in, public URL out".
How:   A MediaBackend performs the actual upload; MediaService does the cheap
       local checks first and hands back the backend's UploadResult.
Who:   Called by StylistService during create.

Backends:
    CloudinaryBackend: signed upload to Cloudinary's REST API over httpx
    LocalBackend:      writes under STORAGE_ROOT with aiofiles; the files are
                       served by GET /api/files/{path}

URL extraction:
    Upload results may carry the public URL under `path`, `secure_url` or
    `url`. extract_photo_url() takes the first non-empty one in that order
    and returns "" when none is present.

Discarding:
    A photo uploaded for a create that then fails to persist is removed
    again with discard_photo(). Removal is best-effort and never raises.
"""

import logging
import time
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence

import aiofiles
import cloudinary.utils
import httpx
import magic
from pydantic import BaseModel

from app.config import settings
from app.exceptions import MediaUploadError, SalonError, ValidationError
from app.schemas.stylist import PhotoUpload

logger = logging.getLogger(__name__)

# Folder and formats every stylist photo is uploaded with
STYLIST_FOLDER = "stylists"
ALLOWED_FORMATS = ("jpg", "png", "jpeg", "webp")

# Content types accepted after inspecting the file's leading bytes
ALLOWED_MIME_TYPES = ("image/jpeg", "image/png", "image/webp")


class UploadResult(BaseModel):
    """Typed view of a media backend's success response."""
    path: Optional[str] = None
    secure_url: Optional[str] = None
    url: Optional[str] = None
    public_id: Optional[str] = None

    model_config = {"extra": "ignore"}

    @property
    def photo_url(self) -> str:
        return extract_photo_url(self)


def extract_photo_url(result: Optional[UploadResult]) -> str:
    """First non-empty of path, secure_url, url; "" when there is none."""
    if result is None:
        return ""
    for candidate in (result.path, result.secure_url, result.url):
        if candidate:
            return candidate
    return ""


# ══════════════════════════════════════════════════════════════════════════
# Backends
# ══════════════════════════════════════════════════════════════════════════

class MediaBackend(ABC):
    """Contract: store bytes under a folder, describe where they live, remove them."""

    @abstractmethod
    async def store(
        self,
        content: bytes,
        filename: str,
        folder: str,
        allowed_formats: Sequence[str],
    ) -> UploadResult:
        """
        Upload one file.

        Raises:
            MediaUploadError: the backend rejected the file or was unreachable
        """

    @abstractmethod
    async def delete(self, public_id: str) -> None:
        """
        Remove a previously stored file by its public_id.

        Raises:
            MediaUploadError: the backend could not remove it
        """


class CloudinaryBackend(MediaBackend):
    """
    Signed uploads to https://api.cloudinary.com/v1_1/<cloud>/image/upload.

    Requests are signed with the Cloudinary SDK's api_sign_request; the
    transfer itself goes through httpx because the SDK uploader is
    synchronous. Cloudinary enforces `allowed_formats` itself and answers
    400 for anything else.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    @staticmethod
    def sign(params: dict, api_secret: str) -> str:
        return cloudinary.utils.api_sign_request(params, api_secret)

    def _signed(self, params: dict) -> dict:
        return {
            **params,
            "api_key": settings.cloudinary_api_key,
            "signature": self.sign(params, settings.cloudinary_api_secret),
        }

    def _endpoint(self, action: str) -> str:
        return f"{settings.cloudinary_upload_url}/{settings.cloudinary_cloud_name}/image/{action}"

    async def _post(self, action: str, data: dict, files: Optional[dict] = None) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                timeout=settings.http_timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(self._endpoint(action), data=data, files=files)
        except httpx.HTTPError as e:
            logger.error("Cloudinary %s request failed: %s", action, str(e))
            raise MediaUploadError(
                message="Photo upload failed",
                context={"error": str(e) or type(e).__name__},
            )

        if response.status_code >= 400:
            try:
                detail = response.json().get("error", {}).get("message", response.text)
            except ValueError:
                detail = response.text
            logger.error("Cloudinary rejected %s (%d): %s", action, response.status_code, detail)
            raise MediaUploadError(
                message="Photo upload failed",
                context={"error": detail, "status_code": response.status_code},
            )
        return response

    async def store(
        self,
        content: bytes,
        filename: str,
        folder: str,
        allowed_formats: Sequence[str],
    ) -> UploadResult:
        if not settings.cloudinary_configured:
            raise MediaUploadError(
                message="Photo upload is not configured",
                context={"error": "Cloudinary credentials are missing"},
            )

        data = self._signed({
            "allowed_formats": ",".join(allowed_formats),
            "folder": folder,
            "timestamp": str(int(time.time())),
        })
        response = await self._post("upload", data, files={"file": (filename, content)})

        result = UploadResult.model_validate(response.json())
        logger.info("Photo uploaded to Cloudinary: %s", result.public_id)
        return result

    async def delete(self, public_id: str) -> None:
        data = self._signed({
            "public_id": public_id,
            "timestamp": str(int(time.time())),
        })
        await self._post("destroy", data)
        logger.info("Photo removed from Cloudinary: %s", public_id)


class LocalBackend(MediaBackend):
    """
    Stores photos on the local file system.

    Layout: <storage_root>/<folder>/<uuid>.<ext>
    The returned URL is relative to the API host (/api/files/...), and
    public_id is the path relative to the storage root.
    """

    def __init__(self, storage_root: Optional[str] = None):
        self._storage_root = storage_root

    @property
    def storage_root(self) -> Path:
        return Path(self._storage_root or settings.storage_root).resolve()

    async def store(
        self,
        content: bytes,
        filename: str,
        folder: str,
        allowed_formats: Sequence[str],
    ) -> UploadResult:
        ext = Path(filename).suffix.lower().lstrip(".")
        if ext not in allowed_formats:
            raise MediaUploadError(
                message="Photo upload failed",
                context={"error": f"Image format '{ext}' not allowed"},
            )

        relative_path = f"{folder}/{uuid.uuid4()}.{ext}"
        absolute_path = self.storage_root / relative_path

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store photo at %s: %s", absolute_path, str(e))
            raise MediaUploadError(
                message="Photo upload failed",
                context={"error": str(e)},
            )

        logger.info("Photo stored locally: %s (%d bytes)", relative_path, len(content))
        return UploadResult(url=f"/api/files/{relative_path}", public_id=relative_path)

    async def delete(self, public_id: str) -> None:
        target = (self.storage_root / public_id).resolve()
        if not target.is_relative_to(self.storage_root):
            raise MediaUploadError(
                message="Photo removal failed",
                context={"error": f"Path outside storage root: {public_id}"},
            )
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            raise MediaUploadError(message="Photo removal failed", context={"error": str(e)})
        logger.info("Photo removed locally: %s", public_id)


# ══════════════════════════════════════════════════════════════════════════
# Media Service
# ══════════════════════════════════════════════════════════════════════════

class MediaService:
    """
    Front door for photo uploads.

    Validation order (cheapest first):
        1. Extension check
        2. Size check
        3. Content type check (magic bytes)
        4. Backend upload
    """

    def __init__(self, backend: Optional[MediaBackend] = None):
        self._backend = backend

    @property
    def backend(self) -> MediaBackend:
        # Resolved per call so MEDIA_BACKEND changes apply without re-import
        if self._backend is not None:
            return self._backend
        if settings.media_backend == "local":
            return LocalBackend()
        return CloudinaryBackend()

    @property
    def backend_name(self) -> str:
        if self._backend is not None:
            return type(self._backend).__name__
        if settings.media_backend == "local":
            return "local"
        return "cloudinary" if settings.cloudinary_configured else "unconfigured"

    def validate_extension(self, filename: str) -> str:
        """Returns the normalized extension (lowercase, no dot)."""
        ext = Path(filename).suffix.lower().lstrip(".")
        if ext not in ALLOWED_FORMATS:
            raise ValidationError(
                message=(
                    f"Photo type '{ext or 'unknown'}' is not supported. "
                    f"Allowed types: {', '.join(ALLOWED_FORMATS)}"
                ),
                field="photo",
                context={"extension": ext, "allowed": list(ALLOWED_FORMATS)},
            )
        return ext

    def validate_size(self, size: int) -> None:
        max_mb = settings.max_file_size / (1024 * 1024)
        if size > settings.max_file_size:
            raise ValidationError(
                message=f"Photo size ({size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="photo",
                context={"max_size_mb": max_mb, "actual_size": size},
            )

    def validate_mime_type(self, content: bytes, filename: str) -> str:
        """
        Detect the real content type from the file's leading bytes.

        A renamed file (HTML saved as .jpg, say) is rejected here even
        though its extension passed.
        """
        try:
            mime_type = magic.from_buffer(content, mime=True)
        except magic.MagicException as e:
            logger.error("Content type detection failed for %s: %s", filename, str(e))
            raise MediaUploadError(
                message="Could not verify photo type",
                context={"error": str(e)},
            )

        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                message=(
                    f"Photo content type '{mime_type}' is not supported. "
                    "The file must be a JPEG, PNG or WebP image."
                ),
                field="photo",
                context={"detected_mime": mime_type, "allowed": list(ALLOWED_MIME_TYPES)},
            )
        return mime_type

    async def store_photo(self, photo: PhotoUpload) -> UploadResult:
        """
        Validate and upload a stylist photo.

        Returns:
            The backend's UploadResult; its photo_url is "" if the backend
            reported no URL.

        Raises:
            ValidationError: unsupported extension, size or content (400)
            MediaUploadError: backend failure (500)
        """
        self.validate_extension(photo.filename)
        self.validate_size(len(photo.content))
        self.validate_mime_type(photo.content, photo.filename)

        try:
            result = await self.backend.store(
                content=photo.content,
                filename=photo.filename,
                folder=STYLIST_FOLDER,
                allowed_formats=ALLOWED_FORMATS,
            )
        except SalonError:
            raise
        except Exception as e:
            logger.error("Unexpected media backend error: %s", str(e), exc_info=True)
            raise MediaUploadError(
                message="Photo upload failed",
                context={"error": str(e), "error_type": type(e).__name__},
            )

        if not result.photo_url:
            logger.warning("Media backend returned no URL for %s", photo.filename)
        return result

    async def discard_photo(self, result: Optional[UploadResult]) -> None:
        """Best-effort removal of an uploaded photo. Never raises."""
        if result is None or not result.public_id:
            return
        try:
            await self.backend.delete(result.public_id)
        except Exception as e:
            logger.warning("Could not discard photo %s: %s", result.public_id, str(e))


# ── Singleton Instance ────────────────────────────────────────────────────
media_service = MediaService()
