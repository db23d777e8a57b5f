"""
Salon Backend — Local Photo Files
===================================

What:  Serves photos written by the local media backend.
Who:   <img> tags pointing at a stylist's photoUrl when MEDIA_BACKEND=local.

With the Cloudinary backend photo URLs point at Cloudinary directly and
this route is never hit.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

from app.config import settings
from app.exceptions import NotFoundError, ValidationError

router = APIRouter(prefix="/api", tags=["Files"])


@router.get(
    "/files/{file_path:path}",
    summary="Serve a locally stored stylist photo",
    responses={
        200: {"description": "Image file"},
        404: {"description": "File not found"},
    },
)
async def serve_file(file_path: str) -> FileResponse:
    storage_root = Path(settings.storage_root).resolve()
    full_path = (storage_root / file_path).resolve()

    # Reject ../ escapes out of the storage root
    if not full_path.is_relative_to(storage_root):
        raise ValidationError(message="Invalid file path")

    if not full_path.is_file():
        raise NotFoundError(resource="File", resource_id=file_path)

    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
