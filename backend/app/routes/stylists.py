"""
Salon Backend — Stylist Route Handlers
========================================

What:  The stylist resource: create, list, deactivate, reactivate, delete.
Why:   HTTP entry point for salon staff management.
How:   Extracts form fields, files and path params, delegates to
       StylistService, returns the response model.

Route Inventory (relative to settings.api_prefix, default /api/stylists):
    POST   ""                  create (multipart form + optional 'photo')
    GET    ""                  list
    PUT    "/{id}/inactive"    deactivate
    PUT    "/{id}/active"      reactivate
    DELETE "/{id}"             delete

Form fields are declared optional so that a missing field reaches the
service and yields the resource's 400 "All fields are required".
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.schemas.stylist import (
    ErrorResponse,
    MessageResponse,
    PhotoUpload,
    StylistCreateResponse,
    StylistResponse,
    StylistStatusResponse,
)
from app.services.stylist_service import stylist_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.api_prefix, tags=["Stylists"])


@router.post(
    "",
    status_code=201,
    response_model=StylistCreateResponse,
    responses={
        201: {"description": "Stylist created", "model": StylistCreateResponse},
        400: {"description": "Missing fields, unsupported photo or duplicate email", "model": ErrorResponse},
        500: {"description": "Upload or database failure", "model": ErrorResponse},
    },
    summary="Add a stylist",
)
async def create_stylist(
    name: Optional[str] = Form(default=None),
    phone: Optional[str] = Form(default=None),
    email: Optional[str] = Form(default=None),
    role: Optional[str] = Form(default=None),
    photo: Optional[UploadFile] = File(default=None, description="Profile photo (jpg, png, jpeg, webp)"),
    db: AsyncSession = Depends(get_db_session),
) -> StylistCreateResponse:
    """
    Create a stylist, upload the optional photo and send the welcome email.

    The response always includes welcomeEmailStatus, even when the email
    could not be delivered.
    """
    upload: Optional[PhotoUpload] = None
    if photo is not None:
        try:
            if photo.filename:
                content = await photo.read()
                if content:
                    upload = PhotoUpload(
                        filename=photo.filename,
                        content=content,
                        content_type=photo.content_type,
                    )
        finally:
            await photo.close()

    logger.info(
        "Received create stylist request: photo=%s",
        f"{upload.filename} ({len(upload.content)} bytes)" if upload else "none",
    )

    return await stylist_service.create_stylist(
        db=db,
        name=name,
        phone=phone,
        email=email,
        role=role,
        photo=upload,
    )


@router.get(
    "",
    response_model=List[StylistResponse],
    responses={500: {"description": "Database failure", "model": ErrorResponse}},
    summary="List all stylists",
)
async def list_stylists(db: AsyncSession = Depends(get_db_session)) -> List[StylistResponse]:
    return await stylist_service.list_stylists(db)


@router.put(
    "/{stylist_id}/inactive",
    response_model=StylistStatusResponse,
    responses={
        400: {"description": "Malformed stylist ID", "model": ErrorResponse},
        404: {"description": "Stylist not found", "model": ErrorResponse},
        500: {"description": "Database failure", "model": ErrorResponse},
    },
    summary="Mark a stylist as inactive",
)
async def deactivate_stylist(
    stylist_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> StylistStatusResponse:
    return await stylist_service.deactivate(db, stylist_id)


@router.put(
    "/{stylist_id}/active",
    response_model=StylistStatusResponse,
    responses={
        400: {"description": "Malformed stylist ID", "model": ErrorResponse},
        404: {"description": "Stylist not found", "model": ErrorResponse},
        500: {"description": "Database failure", "model": ErrorResponse},
    },
    summary="Reactivate a stylist",
)
async def reactivate_stylist(
    stylist_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> StylistStatusResponse:
    return await stylist_service.reactivate(db, stylist_id)


@router.delete(
    "/{stylist_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Malformed stylist ID", "model": ErrorResponse},
        404: {"description": "Stylist not found", "model": ErrorResponse},
        500: {"description": "Database failure", "model": ErrorResponse},
    },
    summary="Delete a stylist",
)
async def delete_stylist(
    stylist_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await stylist_service.delete_stylist(db, stylist_id)
