"""
Salon Backend — Stylist Service (Business Logic Orchestrator)
===============================================================

What:  Validates stylist input and coordinates upload → persist → notify.
Why:   Encapsulates all business logic in one place, independent of HTTP concerns.
How:   Composes MediaService, StylistRepository and EmailService.
Who:   Called by the stylist route handlers.

Orchestration Flow (create):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────────┐
    │ Validate │───▶│ Upload photo│───▶│  Insert row  │───▶│ Welcome email│
    │ & trim   │    │ (optional)  │    │  (committed) │    │ (best-effort)│
    └──────────┘    └─────────────┘    └──────────────┘    └──────────────┘

    Each step is awaited before the next starts. A photo uploaded for a row
    that then fails to insert is discarded again. The welcome email can never
    fail the request: its outcome is reduced to a WelcomeEmailStatus.

Design Decision:
    StylistService is stateless: it receives the db session for each call and
    reaches its collaborators through module-level singletons, which tests
    replace with patch().
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DependencyError, NotFoundError, SalonError, ValidationError
from app.models.stylist import Stylist, StylistStatus
from app.schemas.stylist import (
    MessageResponse,
    PhotoUpload,
    StylistCreateResponse,
    StylistResponse,
    StylistStatusResponse,
    WelcomeEmailStatus,
)
from app.services.email_service import email_service
from app.services.email_templates import WELCOME_SUBJECT, stylist_welcome_html
from app.services.media_service import media_service
from app.services.stylist_repository import stylist_repository

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    StylistStatus.INACTIVE: "Stylist marked as inactive",
    StylistStatus.ACTIVE: "Stylist reactivated",
}


def parse_stylist_id(raw_id: str) -> UUID:
    """
    Interpret a path identifier.

    Uninterpretable identifiers are a client error (400), not a lookup miss.
    """
    try:
        return UUID(str(raw_id))
    except ValueError:
        raise ValidationError(
            message="Invalid stylist ID",
            field="id",
            context={"id": raw_id},
        )


class StylistService:
    """
    Business logic layer for stylist operations.

    Responsibilities:
        - create_stylist(): validate, upload, persist, welcome
        - list_stylists(): full listing
        - set_status(): deactivate / reactivate
        - delete_stylist(): removal with not-found handling
    """

    async def create_stylist(
        self,
        db: AsyncSession,
        name: Optional[str],
        phone: Optional[str],
        email: Optional[str],
        role: Optional[str],
        photo: Optional[PhotoUpload] = None,
    ) -> StylistCreateResponse:
        """
        Create a stylist and attempt the welcome email.

        Normalization:
            name, phone → trimmed
            email       → trimmed and lower-cased
            role        → stored verbatim

        Raises:
            ValidationError: a required field is missing or blank (400),
                             or the photo was rejected before upload (400)
            ConflictError: the email is already taken (400)
            DependencyError: upload or store failure (500)
        """
        fields = {"name": name, "phone": phone, "email": email, "role": role}
        missing = [key for key, value in fields.items() if value is None or not value.strip()]
        if missing:
            raise ValidationError(
                message="All fields are required",
                context={"missing": missing},
            )

        uploaded = None
        try:
            if photo is not None and photo.content:
                uploaded = await media_service.store_photo(photo)

            stylist = Stylist(
                name=name.strip(),
                phone=phone.strip(),
                email=email.strip().lower(),
                role=role,
                photo_url=uploaded.photo_url if uploaded is not None else "",
                status=StylistStatus.ACTIVE.value,
            )
            saved = await stylist_repository.insert(db, stylist)

        except Exception as e:
            # The record was not stored, so neither is its photo
            if uploaded is not None:
                await media_service.discard_photo(uploaded)
            if isinstance(e, SalonError):
                raise
            logger.error("Unexpected error creating stylist: %s", str(e), exc_info=True)
            raise DependencyError(
                message="Server error",
                context={"error": str(e), "error_type": type(e).__name__},
            )

        welcome_status = await self.send_welcome_email(saved)

        return StylistCreateResponse(
            message="Stylist added successfully",
            stylist=StylistResponse.model_validate(saved),
            welcome_email_status=welcome_status,
        )

    async def send_welcome_email(self, stylist: Stylist) -> WelcomeEmailStatus:
        """
        Best-effort welcome email. Never raises.

        Returns:
            SENT / FALLBACK on delivery, FAILED on a non-success result,
            ERROR if the notifier raised.
        """
        status = WelcomeEmailStatus.NONE
        try:
            html = stylist_welcome_html(name=stylist.name, role=stylist.role)
            result = await email_service.send(
                to=stylist.email,
                subject=WELCOME_SUBJECT,
                html=html,
            )
            if result is not None and result.ok:
                status = WelcomeEmailStatus.FALLBACK if result.fallback else WelcomeEmailStatus.SENT
                logger.info("[Welcome Email] stylist %s status: %s", stylist.id, status.value)
            else:
                status = WelcomeEmailStatus.FAILED
                logger.warning("[Welcome Email] unexpected result for stylist %s: %r", stylist.id, result)
        except Exception as e:
            status = WelcomeEmailStatus.ERROR
            logger.warning("Welcome email for stylist %s failed: %s", stylist.id, getattr(e, "message", str(e)))
        return status

    async def list_stylists(self, db: AsyncSession) -> List[StylistResponse]:
        stylists = await stylist_repository.find_all(db)
        return [StylistResponse.model_validate(s) for s in stylists]

    async def set_status(
        self,
        db: AsyncSession,
        stylist_id: str,
        status: StylistStatus,
    ) -> StylistStatusResponse:
        """
        Unconditionally set a stylist's status.

        Raises:
            ValidationError: malformed id (400)
            NotFoundError: unknown id (404)
        """
        uid = parse_stylist_id(stylist_id)
        stylist = await stylist_repository.update_status(db, uid, status)
        if stylist is None:
            raise NotFoundError(resource="Stylist", resource_id=str(uid))

        return StylistStatusResponse(
            message=STATUS_MESSAGES[status],
            stylist=StylistResponse.model_validate(stylist),
        )

    async def deactivate(self, db: AsyncSession, stylist_id: str) -> StylistStatusResponse:
        return await self.set_status(db, stylist_id, StylistStatus.INACTIVE)

    async def reactivate(self, db: AsyncSession, stylist_id: str) -> StylistStatusResponse:
        return await self.set_status(db, stylist_id, StylistStatus.ACTIVE)

    async def delete_stylist(self, db: AsyncSession, stylist_id: str) -> MessageResponse:
        uid = parse_stylist_id(stylist_id)
        deleted = await stylist_repository.delete_by_id(db, uid)
        if deleted is None:
            raise NotFoundError(resource="Stylist", resource_id=str(uid))
        return MessageResponse(message="Stylist deleted successfully")


# ── Singleton Instance ────────────────────────────────────────────────────
stylist_service = StylistService()
