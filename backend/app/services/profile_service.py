"""
Species Catalog Backend — Profile Service
=========================================

What:  Read-only access to `profiles` for attribution display.
Who:   The listing composition (viewer name) and GET /api/profiles/me.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError
from app.models.profile import Profile
from app.schemas.profile import ProfileResponse
from app.schemas.species import NO_DISPLAY_NAME

logger = logging.getLogger(__name__)


class ProfileService:
    """Looks up display names. Never writes."""

    async def get_display_name(self, db: AsyncSession, user_id: uuid.UUID) -> str:
        """Display name of `user_id`, or "No name" when the profile row is missing."""
        try:
            result = await db.execute(
                select(Profile.display_name).where(Profile.id == user_id)
            )
            name = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching profile %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not load your profile. Please try again.",
                context={"user_id": str(user_id)},
            )
        return name if name is not None else NO_DISPLAY_NAME

    async def get_profile(self, db: AsyncSession, user_id: uuid.UUID) -> ProfileResponse:
        display_name = await self.get_display_name(db, user_id)
        return ProfileResponse(id=user_id, display_name=display_name)


profile_service = ProfileService()
