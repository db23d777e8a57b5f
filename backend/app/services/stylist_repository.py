"""
Salon Backend — Stylist Repository (Record Store)
===================================================

What:  The only module that issues SQL against the `stylists` table.
Why:   Keeps vendor-specific error handling (integrity violations, driver
       errors) out of the business logic.
How:   Each method receives the request's AsyncSession, performs exactly one
       logical store operation and commits it before returning.
Who:   Called by StylistService.

Store contract:
    insert(stylist)                 → Stylist | ConflictError
    find_all()                      → List[Stylist]
    find_by_id(id)                  → Stylist | None
    update_status(id, status)       → Stylist | None   (post-mutation record)
    delete_by_id(id)                → Stylist | None

Why commit per operation:
    The create flow must have the record durably stored before the welcome
    email is attempted, and a unique violation must surface here (not when
    the session dependency commits after the handler has returned).
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, DatabaseError
from app.models.stylist import Stylist, StylistStatus

logger = logging.getLogger(__name__)

# Substrings used by PostgreSQL ("duplicate key value violates unique
# constraint") and SQLite ("UNIQUE constraint failed") for unique violations
_UNIQUE_VIOLATION_MARKERS = ("unique", "duplicate")


def _is_unique_violation(exc: IntegrityError) -> bool:
    text = str(exc.orig if exc.orig is not None else exc).lower()
    return any(marker in text for marker in _UNIQUE_VIOLATION_MARKERS)


class StylistRepository:
    """Async SQLAlchemy implementation of the stylist record store."""

    async def insert(self, db: AsyncSession, stylist: Stylist) -> Stylist:
        """
        Persist a new stylist.

        Raises:
            ConflictError: email already belongs to another stylist
            DatabaseError: any other persistence failure
        """
        db.add(stylist)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if _is_unique_violation(e):
                logger.info("Rejected stylist create: email already exists")
                logger.debug("Duplicate stylist email: %s", stylist.email)
                raise ConflictError(
                    message="Email already exists",
                    context={"email": stylist.email},
                )
            logger.error("Integrity error inserting stylist: %s", str(e))
            raise DatabaseError(context={"error": str(e.orig or e)})
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error inserting stylist: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error": str(e)})

        logger.info("Stylist created: %s", stylist.id)
        return stylist

    async def find_all(self, db: AsyncSession) -> List[Stylist]:
        """Every stylist, oldest first (id breaks created_at ties)."""
        try:
            result = await db.execute(
                select(Stylist).order_by(Stylist.created_at.asc(), Stylist.id.asc())
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing stylists: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch stylists",
                context={"error": str(e)},
            )

    async def find_by_id(self, db: AsyncSession, stylist_id: UUID) -> Optional[Stylist]:
        try:
            return await db.get(Stylist, stylist_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching stylist %s: %s", stylist_id, str(e))
            raise DatabaseError(context={"error": str(e), "stylist_id": str(stylist_id)})

    async def update_status(
        self,
        db: AsyncSession,
        stylist_id: UUID,
        status: StylistStatus,
    ) -> Optional[Stylist]:
        """
        Replace the status field and return the updated record.

        Any current status is accepted; setting the same value again is a
        successful no-op. Returns None when the id is unknown.
        """
        stylist = await self.find_by_id(db, stylist_id)
        if stylist is None:
            return None

        stylist.status = status.value
        stylist.updated_at = datetime.now(timezone.utc)
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error updating stylist %s: %s", stylist_id, str(e))
            raise DatabaseError(context={"error": str(e), "stylist_id": str(stylist_id)})

        logger.info("Stylist %s status set to %s", stylist_id, status.value)
        return stylist

    async def delete_by_id(self, db: AsyncSession, stylist_id: UUID) -> Optional[Stylist]:
        """Remove a stylist; returns the deleted record or None if unknown."""
        stylist = await self.find_by_id(db, stylist_id)
        if stylist is None:
            return None

        try:
            await db.delete(stylist)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error deleting stylist %s: %s", stylist_id, str(e))
            raise DatabaseError(context={"error": str(e), "stylist_id": str(stylist_id)})

        logger.info("Stylist deleted: %s", stylist_id)
        return stylist


# ── Singleton Instance ────────────────────────────────────────────────────
stylist_repository = StylistRepository()
