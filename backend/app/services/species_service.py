"""
Species Catalog Backend — Species Service
=========================================

What:  Create, read, update and delete species records.
Who:   Called by the species route handlers and by ListingService.

Ownership rule:
    Only the species' author may update or delete it. Both operations load
    the row through `_get_owned()`, which raises NotFoundError for a
    missing id and PermissionDeniedError for anyone but the author, before
    any write is issued.

Error Handling Strategy:
    Application exceptions propagate unchanged. SQLAlchemy errors are
    logged with context and re-raised as DatabaseError, whose message is
    generic (the global handler never exposes driver details).
"""

import logging
import uuid
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.exceptions import (
    DatabaseError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.models.comment import Comment
from app.models.species import Species
from app.schemas.species import (
    EMPTY_SCIENTIFIC_NAME_MESSAGE,
    SpeciesCreate,
    SpeciesDeletedResponse,
    SpeciesResponse,
    SpeciesUpdate,
)

logger = logging.getLogger(__name__)

# Columns that cannot be cleared with an explicit null in a PATCH body
_NON_NULLABLE_FIELDS = ("scientific_name", "kingdom", "endangered")


class SpeciesService:
    """Business logic layer for species records."""

    async def list_species(self, db: AsyncSession) -> List[Species]:
        """
        All species, newest first, with the author's profile joined.

        Query plan:
            SELECT species.*, profiles.display_name
            FROM species LEFT OUTER JOIN profiles ON profiles.id = species.author
            ORDER BY species.id DESC
        """
        try:
            result = await db.execute(
                select(Species)
                .options(joinedload(Species.author_profile))
                .order_by(Species.id.desc())
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing species: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve species. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_species(self, db: AsyncSession, species_id: int) -> SpeciesResponse:
        species = await self._get(db, species_id)
        return SpeciesResponse.model_validate(species)

    async def create_species(
        self,
        db: AsyncSession,
        author_id: uuid.UUID,
        data: SpeciesCreate,
    ) -> SpeciesResponse:
        """
        Insert a new species authored by `author_id`.

        Raises:
            ValidationError: scientific name is blank after trimming
            DatabaseError: insert failed (e.g. the author has no profile row)
        """
        if not data.scientific_name:
            raise ValidationError(EMPTY_SCIENTIFIC_NAME_MESSAGE, field="scientific_name")

        # mode="json" turns the Kingdom enum into its plain label
        fields = data.model_dump(mode="json")
        species = Species(author=author_id, **fields)

        try:
            db.add(species)
            await db.flush()  # assigns the id without committing
        except SQLAlchemyError as e:
            logger.error("Database error creating species: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the species. Please try again.",
                context={"author_id": str(author_id), "error_type": type(e).__name__},
            )

        logger.info("Species %s created by %s: %s", species.id, author_id, species.scientific_name)
        return SpeciesResponse.model_validate(species)

    async def update_species(
        self,
        db: AsyncSession,
        species_id: int,
        user_id: uuid.UUID,
        data: SpeciesUpdate,
    ) -> SpeciesResponse:
        """
        Apply the fields present in `data` to a species the user authored.

        Raises:
            NotFoundError / PermissionDeniedError: see `_get_owned`
            ValidationError: scientific name supplied but blank
        """
        species = await self._get_owned(db, species_id, user_id)

        changes = data.model_dump(mode="json", exclude_unset=True)
        for name in _NON_NULLABLE_FIELDS:
            if name in changes and changes[name] is None:
                changes.pop(name)
        if "scientific_name" in changes and not changes["scientific_name"]:
            raise ValidationError(EMPTY_SCIENTIFIC_NAME_MESSAGE, field="scientific_name")

        for name, value in changes.items():
            setattr(species, name, value)

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating species %s: %s", species_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save your changes. Please try again.",
                context={"species_id": species_id, "error_type": type(e).__name__},
            )

        logger.info("Species %s updated by %s: %s", species_id, user_id, sorted(changes))
        return SpeciesResponse.model_validate(species)

    async def delete_species(
        self,
        db: AsyncSession,
        species_id: int,
        user_id: uuid.UUID,
    ) -> SpeciesDeletedResponse:
        """
        Delete a species the user authored, together with its comments.

        Comments are deleted explicitly rather than relying on the FK's
        ON DELETE CASCADE, which SQLite only honours with foreign keys enabled.
        """
        species = await self._get_owned(db, species_id, user_id)
        scientific_name = species.scientific_name

        try:
            await db.execute(delete(Comment).where(Comment.species_id == species_id))
            await db.execute(delete(Species).where(Species.id == species_id))
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting species %s: %s", species_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the species. Please try again.",
                context={"species_id": species_id, "error_type": type(e).__name__},
            )

        logger.info("Species %s (%s) deleted by %s", species_id, scientific_name, user_id)
        return SpeciesDeletedResponse(
            id=species_id,
            scientific_name=scientific_name,
            message=f"Successfully deleted {scientific_name}.",
        )

    async def exists(self, db: AsyncSession, species_id: int) -> bool:
        try:
            result = await db.execute(select(Species.id).where(Species.id == species_id))
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            logger.error("Database error checking species %s: %s", species_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the species. Please try again.",
                context={"species_id": species_id},
            )

    # ── Internals ─────────────────────────────────────────────────────────

    async def _get(self, db: AsyncSession, species_id: int) -> Species:
        try:
            result = await db.execute(select(Species).where(Species.id == species_id))
            species = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching species %s: %s", species_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the species. Please try again.",
                context={"species_id": species_id},
            )

        if species is None:
            raise NotFoundError(resource="species", resource_id=str(species_id))
        return species

    async def _get_owned(self, db: AsyncSession, species_id: int, user_id: uuid.UUID) -> Species:
        """Load a species and check that `user_id` authored it."""
        species = await self._get(db, species_id)
        if species.author != user_id:
            logger.warning(
                "User %s attempted to modify species %s owned by %s",
                user_id, species_id, species.author,
            )
            raise PermissionDeniedError(context={"species_id": species_id})
        return species


species_service = SpeciesService()
