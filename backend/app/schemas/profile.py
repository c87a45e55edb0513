"""Profile response schema."""

import uuid

from pydantic import BaseModel, Field


class ProfileResponse(BaseModel):
    """Returned by GET /api/profiles/me."""
    id: uuid.UUID
    display_name: str = Field(description="Display name, or 'No name' when the profile row is missing")
