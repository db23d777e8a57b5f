"""
Salon Backend — Custom Exception Hierarchy
============================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Each exception maps to one HTTP status in the global handlers
       registered by main.py, so services never deal with status codes.
How:   Each exception class carries a message and optional context dict.
Who:   Raised by services and the repository; caught by global handlers.

Exception Hierarchy:
    SalonError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── ConflictError            → 400 Bad Request (duplicate unique key)
    ├── NotFoundError            → 404 Not Found
    └── DependencyError          → 500 Internal Server Error
        ├── DatabaseError        → 500 (record store)
        ├── MediaUploadError     → 500 (media uploader)
        └── EmailDeliveryError   → never surfaced (downgraded to a status tier)
"""

from typing import Any, Dict, Optional


class SalonError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SalonError):
    """
    Raised when client input fails validation.

    When:    Missing stylist fields, malformed identifiers, unsupported photo.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(SalonError):
    """
    Raised by the repository when a unique constraint is violated.

    Why a typed error: The handler matches on type instead of inspecting
    vendor-specific integrity error codes.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Email already exists",
        field: Optional[str] = "email",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(SalonError):
    """
    Raised when a requested resource does not exist.

    The repository returns None for missing rows; the service converts
    None into this exception.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class DependencyError(SalonError):
    """
    Raised when an external collaborator (store, uploader, notifier) fails.

    HTTP:    500 Internal Server Error
    The underlying error message travels in context["error"] and is
    returned as details.error.
    """

    def __init__(
        self,
        message: str = "Server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(DependencyError):
    """Record store query or mutation failed unexpectedly."""


class MediaUploadError(DependencyError):
    """Photo upload to the media backend failed."""


class EmailDeliveryError(DependencyError):
    """
    Every email delivery path failed.

    Never turned into an HTTP error: the stylist service records it as
    the 'error' welcome-email tier and carries on.
    """
