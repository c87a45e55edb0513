"""
Species Catalog Backend — Shared Schemas and Text Normalization
===============================================================

What:  Response shapes shared by every route (errors, health) and the one
       text-normalization rule used by both the backend and the client
       components.
"""

from typing import Optional

from pydantic import BaseModel, Field


def normalize_optional_text(value: Optional[str]) -> Optional[str]:
    """
    Trim `value`; map None, "" and whitespace-only strings to None.

    >>> normalize_optional_text("  Great find!  ")
    'Great find!'
    >>> normalize_optional_text("   ") is None
    True
    """
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description, shown to users as a toast description
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "permission_denied",
            "message": "Only the author of this species can change it.",
            "request_id": "3f9a1c2e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and container health checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
