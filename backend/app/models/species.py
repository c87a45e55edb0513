"""
Species Catalog Backend — Species SQLAlchemy Model
==================================================

What:  ORM model representing the `species` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by SpeciesService for CRUD operations and by the listing composition.

Table Design:
    - Integer id: auto-increment, doubles as a recency proxy (listings are
      ordered by id DESC, never by a timestamp)
    - author: FK to profiles.id; the only user allowed to edit or delete the row
    - description / image: nullable; empty strings are normalized to NULL
      before they reach this model

Lifecycle:
    1. Created by any signed-in user (author = that user)
    2. Updated or deleted by its author only
    3. Deleting a species deletes its comments (FK cascade + explicit delete)
"""

import uuid

from sqlalchemy import BigInteger, Boolean, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.profile import Profile


class Species(Base):
    """A catalog entry describing one biological species."""

    __tablename__ = "species"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    scientific_name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Binomial name, e.g. 'Panthera leo'",
    )

    common_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Stored as plain text so the column matches the hosted schema's enum labels
    kingdom: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="One of: Animalia, Plantae, Fungi, Protista, Archaea, Bacteria",
    )

    total_population: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    endangered: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    image: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Public URL of a representative image",
    )

    author: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id"),
        nullable=False,
        comment="User who created the record; sole editor",
    )

    # lazy="raise": async sessions cannot lazy-load, so every query that needs
    # the author's profile must ask for it with joinedload()
    author_profile: Mapped[Profile | None] = relationship(Profile, lazy="raise")

    __table_args__ = (
        Index("idx_species_author", "author"),
    )

    def __repr__(self) -> str:
        return f"<Species(id={self.id}, scientific_name='{self.scientific_name}')>"
