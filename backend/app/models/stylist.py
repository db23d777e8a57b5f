"""
Salon Backend — Stylist SQLAlchemy Model
==========================================

What:  ORM model representing the `stylists` table.
Why:   Maps Python objects to database rows for type-safe database operations.
How:   Inherits from SQLAlchemy's DeclarativeBase; Alembic reads this for migrations.
Who:   Used by StylistRepository for CRUD operations.

Table Design:
    - UUID primary key: assigned once on insert, never updated
    - email: UNIQUE, always stored trimmed and lower-cased by the service
    - status: 'active' | 'inactive', guarded by a CHECK constraint
    - photo_url: empty string when no photo was uploaded (never NULL)
    - created_at: drives the list ordering
"""

import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class StylistStatus(str, Enum):
    """Lifecycle flag; both transitions are always allowed."""
    ACTIVE = "active"
    INACTIVE = "inactive"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Stylist(Base):
    """
    A stylist working at the salon.

    Lifecycle:
        1. Inserted by the create operation (status = 'active')
        2. status flipped by the deactivate / reactivate operations
        3. Deleted by the delete operation
    """

    __tablename__ = "stylists"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    phone: Mapped[str] = mapped_column(String(64), nullable=False)

    # Uniqueness is enforced by the database; the repository turns the
    # violation into ConflictError
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)

    role: Mapped[str] = mapped_column(String(255), nullable=False)

    photo_url: Mapped[str] = mapped_column(Text, nullable=False, default="")

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=StylistStatus.ACTIVE.value,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'inactive')",
            name="ck_stylists_status",
        ),
        Index("idx_stylists_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Stylist(id={self.id}, email='{self.email}', status='{self.status}')>"
