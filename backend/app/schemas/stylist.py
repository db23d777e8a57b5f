"""
Salon Backend — Pydantic Request/Response Schemas
===================================================

What:  Pydantic models defining the API contract for the stylist resource.
Why:   Automatic serialization and OpenAPI doc generation.
How:   Field names are snake_case in Python and camelCase on the wire
       (photoUrl, welcomeEmailStatus) through an alias generator.

Note:  Create input arrives as multipart form fields and is validated by
       StylistService, not by a request model, so that missing fields
       produce the resource's 400 response instead of FastAPI's 422.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class WelcomeEmailStatus(str, Enum):
    """
    Outcome of the best-effort welcome email.

    SENT:     delivered through the primary path
    FALLBACK: delivered through the notifier's fallback path
    FAILED:   notifier returned a non-success result
    ERROR:    notifier raised
    NONE:     not attempted
    """
    SENT = "sent"
    FALLBACK = "fallback"
    FAILED = "failed"
    ERROR = "error"
    NONE = "none"


_wire_config = {
    "from_attributes": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
}


# ══════════════════════════════════════════════════════════════════════════
# Service Inputs
# ══════════════════════════════════════════════════════════════════════════


@dataclass
class PhotoUpload:
    """An attached photo as read from the multipart request."""
    filename: str
    content: bytes
    content_type: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class StylistResponse(BaseModel):
    """Full representation of a stylist record."""
    id: uuid.UUID = Field(description="Unique stylist identifier (UUID)")
    name: str = Field(description="Display name")
    phone: str = Field(description="Contact phone number")
    email: str = Field(description="Lower-cased, unique email address")
    role: str = Field(description="Free-form role, e.g. 'Colorist'")
    photo_url: str = Field(description="Public photo URL, or empty string")
    status: str = Field(description="active or inactive")
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: datetime = Field(description="Last modification timestamp (UTC)")

    model_config = _wire_config


class StylistCreateResponse(BaseModel):
    """
    Returned by POST with HTTP 201.

    welcome_email_status is always present so callers can observe
    degraded email delivery without the create itself failing.
    """
    message: str = Field(default="Stylist added successfully")
    stylist: StylistResponse
    welcome_email_status: WelcomeEmailStatus = Field(default=WelcomeEmailStatus.NONE)

    model_config = _wire_config


class StylistStatusResponse(BaseModel):
    """Returned by the deactivate / reactivate operations."""
    message: str
    stylist: StylistResponse

    model_config = _wire_config


class MessageResponse(BaseModel):
    """Returned by DELETE."""
    message: str


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "conflict",
            "message": "Email already exists",
            "details": {"field": "email"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    media: str = Field(description="Media backend: cloudinary, local, unconfigured")
    email: List[str] = Field(description="Configured email delivery paths, in order")
    uptime_seconds: float = Field(description="Seconds since service started")
