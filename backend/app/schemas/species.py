"""
Species Catalog Backend — Species Request/Response Schemas
==========================================================

What:  Pydantic models for species CRUD and for the composed listing view.
How:   Request models normalize text on the way in (trim, blank → None);
       response models are built by the service layer from ORM rows.

The listing response is "pre-joined": every name a card needs
is already resolved (author display name, comment author names) with the
fallbacks applied, so the client never has to know about profiles.
"""

import enum
import uuid
from typing import Any, List, Optional

from pydantic import BaseModel, Field, HttpUrl, field_validator

from app.schemas.common import normalize_optional_text


# Display fallbacks used when a profile join or a comment body is absent
UNKNOWN_NAME = "Unknown"
UNKNOWN_CONTENT = "Unknown"
NO_DISPLAY_NAME = "No name"

EMPTY_SCIENTIFIC_NAME_MESSAGE = "Scientific name cannot be empty."


class Kingdom(str, enum.Enum):
    """Top-level taxonomic kingdoms accepted for a species record."""

    ANIMALIA = "Animalia"
    PLANTAE = "Plantae"
    FUNGI = "Fungi"
    PROTISTA = "Protista"
    ARCHAEA = "Archaea"
    BACTERIA = "Bacteria"


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SpeciesCreate(BaseModel):
    """
    Body of POST /api/species.

    There is no `author` field: the author is always the
    session user, never something the client can choose.

    scientific_name is trimmed but NOT rejected here when blank; the service
    raises ValidationError so the user sees a sentence rather than a 422.
    """
    scientific_name: str = Field(description="Binomial name, e.g. 'Panthera leo'")
    common_name: Optional[str] = Field(default=None)
    kingdom: Kingdom = Field(description="Taxonomic kingdom")
    total_population: Optional[int] = Field(default=None, ge=0)
    endangered: bool = Field(default=False)
    description: Optional[str] = Field(default=None)
    image: Optional[HttpUrl] = Field(default=None, description="Public http(s) image URL")

    @field_validator("scientific_name")
    @classmethod
    def strip_scientific_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("common_name", "description")
    @classmethod
    def normalize_text(cls, v: Optional[str]) -> Optional[str]:
        return normalize_optional_text(v)

    @field_validator("image", mode="before")
    @classmethod
    def normalize_image(cls, v: Any) -> Any:
        return normalize_optional_text(v) if isinstance(v, str) else v


class SpeciesUpdate(BaseModel):
    """
    Body of PATCH /api/species/{id}. Only fields present in the request are
    applied (the service uses model_dump(exclude_unset=True)).
    """
    scientific_name: Optional[str] = Field(default=None)
    common_name: Optional[str] = Field(default=None)
    kingdom: Optional[Kingdom] = Field(default=None)
    total_population: Optional[int] = Field(default=None, ge=0)
    endangered: Optional[bool] = Field(default=None)
    description: Optional[str] = Field(default=None)
    image: Optional[HttpUrl] = Field(default=None)

    @field_validator("scientific_name")
    @classmethod
    def strip_scientific_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None

    @field_validator("common_name", "description")
    @classmethod
    def normalize_text(cls, v: Optional[str]) -> Optional[str]:
        return normalize_optional_text(v)

    @field_validator("image", mode="before")
    @classmethod
    def normalize_image(cls, v: Any) -> Any:
        return normalize_optional_text(v) if isinstance(v, str) else v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SpeciesResponse(BaseModel):
    """A species row as stored."""
    id: int
    scientific_name: str
    common_name: Optional[str] = None
    kingdom: Kingdom
    total_population: Optional[int] = None
    endangered: bool
    description: Optional[str] = None
    image: Optional[str] = None
    author: uuid.UUID

    model_config = {"from_attributes": True}


class SpeciesDeletedResponse(BaseModel):
    """Returned by DELETE /api/species/{id}; the message names the species."""
    id: int
    scientific_name: str
    message: str


class CommentView(BaseModel):
    """One comment as the comment list item displays it."""
    id: int = Field(description="Comment id; list order is id DESC")
    author: str = Field(description="Commenter display name, or 'Unknown'")
    content: str = Field(description="Comment text, or 'Unknown' when absent")


class SpeciesCardView(BaseModel):
    """Everything one species card and its detail dialog need."""
    species: SpeciesResponse
    author_name: str = Field(description="Author display name, or 'Unknown'")
    comments: List[CommentView] = Field(default_factory=list)


class SpeciesListing(BaseModel):
    """
    Response of GET /api/species: the whole listing page in one payload.

    session_user_id lets the client decide which cards get edit/delete
    controls; the backend enforces the same rule on PATCH/DELETE.
    """
    session_user_id: uuid.UUID
    viewer_display_name: str = Field(description="Signed-in user's display name, or 'No name'")
    species: List[SpeciesCardView] = Field(default_factory=list, description="Newest first (id DESC)")
