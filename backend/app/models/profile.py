"""
Species Catalog Backend — Profile SQLAlchemy Model
==================================================

What:  ORM model for the `profiles` table: one row per user, keyed by user id.
Who:   Joined by species and comment queries to attribute authorship.
When:  Rows are created by the auth service when a user signs up; this
       backend only reads them.
"""

import uuid

from sqlalchemy import Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Profile(Base):
    """A user's display identity. Read-only from this backend's point of view."""

    __tablename__ = "profiles"

    # Same value as the auth service's user id (the token's `sub` claim)
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        comment="User id issued by the auth service",
    )

    display_name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Name shown next to species and comments",
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, display_name='{self.display_name}')>"
