"""Profile route: who am I, as far as display goes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Session, get_session
from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.profile import ProfileResponse
from app.services.profile_service import profile_service

router = APIRouter(prefix="/api", tags=["Profiles"])


@router.get(
    "/profiles/me",
    response_model=ProfileResponse,
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
    summary="Current user's profile",
)
async def get_my_profile(
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    return await profile_service.get_profile(db, session.user_id)
