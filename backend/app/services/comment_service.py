"""
Species Catalog Backend — Comment Service
=========================================

What:  Posting comments and reading them back grouped by species.
Who:   Called by the comment route handlers and by ListingService.

Rules enforced here:
    - content must be present after normalization (trim, blank → None);
      an absent value is rejected with "Cannot post an empty comment."
      before any query runs
    - the target species must exist
    - comments come back newest first (id DESC), each with its author's
      display name resolved ("Unknown" when the profile is missing) and its
      content ("Unknown" when NULL)
"""

import logging
import uuid
from typing import Dict, List, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.exceptions import DatabaseError, NotFoundError, ValidationError
from app.models.comment import Comment
from app.schemas.comment import EMPTY_COMMENT_MESSAGE, CommentCreate, CommentResponse
from app.schemas.species import UNKNOWN_CONTENT, UNKNOWN_NAME, CommentView
from app.services.species_service import species_service

logger = logging.getLogger(__name__)


def to_comment_view(comment: Comment) -> CommentView:
    """Resolve a comment row (with its profile joined) into display form."""
    profile = comment.author_profile
    return CommentView(
        id=comment.id,
        author=profile.display_name if profile is not None else UNKNOWN_NAME,
        content=comment.content if comment.content is not None else UNKNOWN_CONTENT,
    )


class CommentService:
    """Business logic layer for comments."""

    async def add_comment(
        self,
        db: AsyncSession,
        species_id: int,
        author_id: uuid.UUID,
        data: CommentCreate,
    ) -> CommentResponse:
        """
        Insert one comment on `species_id` by `author_id`.

        Raises:
            ValidationError: content absent after normalization (no query issued)
            NotFoundError: the species does not exist
            DatabaseError: insert failed
        """
        if data.content is None:
            raise ValidationError(EMPTY_COMMENT_MESSAGE, field="content")

        if not await species_service.exists(db, species_id):
            raise NotFoundError(resource="species", resource_id=str(species_id))

        comment = Comment(species_id=species_id, author_id=author_id, content=data.content)
        try:
            db.add(comment)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error posting comment on species %s: %s", species_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not post your comment. Please try again.",
                context={"species_id": species_id, "error_type": type(e).__name__},
            )

        logger.info("Comment %s posted on species %s by %s", comment.id, species_id, author_id)
        return CommentResponse.model_validate(comment)

    async def list_comments(
        self,
        db: AsyncSession,
        species_ids: Sequence[int],
    ) -> Dict[int, List[CommentView]]:
        """
        Comments for several species in one query, grouped by species id.

        Every requested id gets an entry (an empty list when it has no
        comments). Within a group, order is id DESC.
        """
        if not species_ids:
            return {}

        try:
            result = await db.execute(
                select(Comment)
                .options(joinedload(Comment.author_profile))
                .where(Comment.species_id.in_(list(species_ids)))
                .order_by(Comment.id.desc())
            )
            rows = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing comments: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve comments. Please try again.",
                context={"error_type": type(e).__name__},
            )

        grouped: Dict[int, List[CommentView]] = {sid: [] for sid in species_ids}
        for comment in rows:
            grouped.setdefault(comment.species_id, []).append(to_comment_view(comment))
        return grouped

    async def list_for_species(self, db: AsyncSession, species_id: int) -> List[CommentView]:
        if not await species_service.exists(db, species_id):
            raise NotFoundError(resource="species", resource_id=str(species_id))
        grouped = await self.list_comments(db, [species_id])
        return grouped[species_id]


comment_service = CommentService()
