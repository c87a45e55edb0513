"""
Species Catalog Backend — Listing Composition
=============================================

What:  Assembles the species listing page in one payload.
How:   Three reads, no writes:
           1. viewer display name        (ProfileService)
           2. species + author profiles  (SpeciesService, id DESC)
           3. comments + commenter names (CommentService, one query, id DESC)
       then joins them in memory into SpeciesCardView objects.
Who:   GET /api/species.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Session
from app.schemas.species import (
    UNKNOWN_NAME,
    SpeciesCardView,
    SpeciesListing,
    SpeciesResponse,
)
from app.services.comment_service import comment_service
from app.services.profile_service import profile_service
from app.services.species_service import species_service

logger = logging.getLogger(__name__)


class ListingService:

    async def build_listing(self, db: AsyncSession, session: Session) -> SpeciesListing:
        viewer_name = await profile_service.get_display_name(db, session.user_id)
        species_rows = await species_service.list_species(db)
        comments = await comment_service.list_comments(db, [s.id for s in species_rows])

        cards = []
        for species in species_rows:
            profile = species.author_profile
            cards.append(
                SpeciesCardView(
                    species=SpeciesResponse.model_validate(species),
                    author_name=profile.display_name if profile is not None else UNKNOWN_NAME,
                    comments=comments.get(species.id, []),
                )
            )

        logger.debug("Built listing for %s: %d species", session.user_id, len(cards))
        return SpeciesListing(
            session_user_id=session.user_id,
            viewer_display_name=viewer_name,
            species=cards,
        )


listing_service = ListingService()
