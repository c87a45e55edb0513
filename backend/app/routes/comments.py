"""
Species Catalog Backend — Comment Route Handlers
================================================

What:  Reading and posting comments on a species.
Who:   Called by the AddCommentForm client component.

Routes:
    GET  /api/species/{id}/comments   newest first, names resolved
    POST /api/species/{id}/comments   any signed-in user
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Session, get_session
from app.database import get_db_session
from app.schemas.comment import CommentCreate, CommentResponse
from app.schemas.common import ErrorResponse
from app.schemas.species import CommentView
from app.services.comment_service import comment_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Comments"])


@router.get(
    "/species/{species_id}/comments",
    response_model=List[CommentView],
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        404: {"description": "Species not found", "model": ErrorResponse},
    },
    summary="List comments on a species",
)
async def list_comments(
    species_id: int,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db_session),
) -> List[CommentView]:
    return await comment_service.list_for_species(db, species_id)


@router.post(
    "/species/{species_id}/comments",
    status_code=201,
    response_model=CommentResponse,
    responses={
        400: {"description": "Empty comment", "model": ErrorResponse},
        401: {"description": "Not signed in", "model": ErrorResponse},
        404: {"description": "Species not found", "model": ErrorResponse},
    },
    summary="Post a comment",
    description="Content is trimmed; empty or whitespace-only content is rejected.",
)
async def post_comment(
    species_id: int,
    data: CommentCreate,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    return await comment_service.add_comment(
        db, species_id=species_id, author_id=session.user_id, data=data
    )
