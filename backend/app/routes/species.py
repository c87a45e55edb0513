"""
Species Catalog Backend — Species Route Handlers
================================================

What:  The species listing page and species CRUD.
How:   Resolves the session, delegates to the services, returns JSON.
Who:   Called by the client components (SpeciesListPage, the species
       dialogs) through CatalogClient.

Routes:
    GET    /api/species        listing (303 → entry point when signed out)
    POST   /api/species        create (author = session user)
    GET    /api/species/{id}   single species
    PATCH  /api/species/{id}   update (author only)
    DELETE /api/species/{id}   delete with comments (author only)
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Session, get_session, get_session_or_redirect
from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.species import (
    SpeciesCreate,
    SpeciesDeletedResponse,
    SpeciesListing,
    SpeciesResponse,
    SpeciesUpdate,
)
from app.services.listing_service import listing_service
from app.services.species_service import species_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Species"])

_AUTHOR_ONLY_RESPONSES = {
    400: {"description": "Blank scientific name", "model": ErrorResponse},
    401: {"description": "Not signed in", "model": ErrorResponse},
    403: {"description": "Not the species' author", "model": ErrorResponse},
    404: {"description": "Species not found", "model": ErrorResponse},
}


@router.get(
    "/species",
    response_model=SpeciesListing,
    responses={
        303: {"description": "Not signed in; redirected to the entry point"},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Species listing page",
    description=(
        "All species newest first, each with its author's display name and its "
        "comments (newest first, with commenter display names)."
    ),
)
async def list_species(
    response: Response,
    session: Session = Depends(get_session_or_redirect),
    db: AsyncSession = Depends(get_db_session),
) -> SpeciesListing:
    listing = await listing_service.build_listing(db, session)
    # Listing is per-viewer and changes on every mutation
    response.headers["Cache-Control"] = "private, no-store"
    return listing


@router.post(
    "/species",
    status_code=201,
    response_model=SpeciesResponse,
    responses={
        400: {"description": "Blank scientific name", "model": ErrorResponse},
        401: {"description": "Not signed in", "model": ErrorResponse},
    },
    summary="Add a species",
)
async def create_species(
    data: SpeciesCreate,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db_session),
) -> SpeciesResponse:
    """Create a species authored by the signed-in user."""
    return await species_service.create_species(db, author_id=session.user_id, data=data)


@router.get(
    "/species/{species_id}",
    response_model=SpeciesResponse,
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        404: {"description": "Species not found", "model": ErrorResponse},
    },
    summary="Get a single species",
)
async def get_species(
    species_id: int,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db_session),
) -> SpeciesResponse:
    return await species_service.get_species(db, species_id)


@router.patch(
    "/species/{species_id}",
    response_model=SpeciesResponse,
    responses=_AUTHOR_ONLY_RESPONSES,
    summary="Edit a species (author only)",
)
async def update_species(
    species_id: int,
    data: SpeciesUpdate,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db_session),
) -> SpeciesResponse:
    return await species_service.update_species(
        db, species_id=species_id, user_id=session.user_id, data=data
    )


@router.delete(
    "/species/{species_id}",
    response_model=SpeciesDeletedResponse,
    responses=_AUTHOR_ONLY_RESPONSES,
    summary="Delete a species and its comments (author only)",
)
async def delete_species(
    species_id: int,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db_session),
) -> SpeciesDeletedResponse:
    return await species_service.delete_species(
        db, species_id=species_id, user_id=session.user_id
    )
