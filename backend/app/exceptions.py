"""
Species Catalog Backend — Custom Exception Hierarchy
====================================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and auth dependencies; caught by global handlers.
When:  During request processing when recoverable errors occur.

Exception Hierarchy:
    SpeciesCatalogError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized
    │   └── LoginRequiredError   → 303 redirect to the entry point
    ├── PermissionDeniedError    → 403 Forbidden (not the species' author)
    ├── NotFoundError            → 404 Not Found
    └── DatabaseError            → 500 Internal Server Error

The `message` of every exception except DatabaseError is shown to the user
verbatim by the client components, so it must read as a sentence.
"""

from typing import Any, Dict, Optional


class SpeciesCatalogError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; returned only where the handler says so)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SpeciesCatalogError):
    """
    Raised when client input fails a business rule.

    When:    Empty comment, empty scientific name.
    HTTP:    400 Bad Request

    Schema-level problems (wrong types, unknown kingdom) are still reported
    by FastAPI as 422; this class is for rules the service layer owns.

    Example response:
        {
            "error": "validation_error",
            "message": "Cannot post an empty comment.",
            "details": {"field": "content"}
        }
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


class AuthenticationError(SpeciesCatalogError):
    """
    Raised when a request carries no valid session.

    When:    Missing, malformed, expired, or wrongly signed token.
    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "You must be signed in to do that.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class LoginRequiredError(AuthenticationError):
    """
    Raised by protected *pages* (the species listing) instead of a 401.

    HTTP:    303 See Other, Location = settings.entry_point_url
    """

    def __init__(
        self,
        redirect_to: str = "/",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["redirect_to"] = redirect_to
        super().__init__(message="Sign in to view this page.", context=ctx)
        self.redirect_to = redirect_to


class PermissionDeniedError(SpeciesCatalogError):
    """
    Raised when a signed-in user tries to mutate something they don't own.

    When:    Editing or deleting a species authored by someone else.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Only the author of this species can change it.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(SpeciesCatalogError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PATCH/DELETE /api/species/{id} or commenting on a missing species.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(SpeciesCatalogError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Query text and
    driver errors are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
