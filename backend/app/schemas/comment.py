"""
Species Catalog Backend — Comment Request/Response Schemas
==========================================================

What:  Pydantic models for posting a comment and reading one back.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import normalize_optional_text

EMPTY_COMMENT_MESSAGE = "Cannot post an empty comment."


class CommentCreate(BaseModel):
    """
    Body of POST /api/species/{id}/comments.

    `content` is normalized (trimmed, blank → None) but not rejected here:
    CommentService turns an absent value into the user-facing
    "Cannot post an empty comment." error.
    """
    content: Optional[str] = Field(default=None, description="Comment text")

    @field_validator("content")
    @classmethod
    def normalize_content(cls, v: Optional[str]) -> Optional[str]:
        return normalize_optional_text(v)


class CommentResponse(BaseModel):
    """A comment row as stored."""
    id: int
    species_id: int
    author_id: uuid.UUID
    content: Optional[str] = None

    model_config = {"from_attributes": True}
