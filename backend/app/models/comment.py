"""
Species Catalog Backend — Comment SQLAlchemy Model
==================================================

What:  ORM model representing the `comment` table.
Who:   Used by CommentService (insert, list) and SpeciesService (cascade delete).

Column naming:
    The hosted schema uses camelCase column names (`speciesId`, `authorId`).
    They are kept verbatim in the database; Python code sees snake_case
    attributes (`species_id`, `author_id`).

Invariants:
    - species_id always references an existing species (checked before insert,
      enforced by the FK, removed together with the species)
    - content is NULL or non-blank trimmed text, never "" or whitespace
    - comments are never edited or deleted individually
"""

import uuid

from sqlalchemy import ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.profile import Profile


class Comment(Base):
    """User-authored text attached to a species record."""

    __tablename__ = "comment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    species_id: Mapped[int] = mapped_column(
        "speciesId",
        Integer,
        ForeignKey("species.id", ondelete="CASCADE"),
        nullable=False,
    )

    author_id: Mapped[uuid.UUID] = mapped_column(
        "authorId",
        Uuid,
        ForeignKey("profiles.id"),
        nullable=False,
    )

    content: Mapped[str | None] = mapped_column(Text, nullable=True)

    author_profile: Mapped[Profile | None] = relationship(Profile, lazy="raise")

    __table_args__ = (
        # Listing pattern: WHERE "speciesId" IN (...) ORDER BY id DESC
        Index("idx_comment_species_id", "speciesId", "id"),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, species_id={self.species_id})>"
