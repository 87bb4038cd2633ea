from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from socialfeed.db.client import DataClient
from socialfeed.db.session import get_db
from socialfeed.schemas.profile_schema import ProfileRead, SessionRead
from socialfeed.services.profile_service import ProfileService
from socialfeed.services.session_service import (
    Session,
    SessionService,
    get_session,
    get_session_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=SessionRead)
async def read_session(
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db)
):
    """Current user identity and profile"""
    try:
        profile = await ProfileService(DataClient(db)).get_profile(session.user_id)
        return SessionRead(
            user_id=session.user_id,
            email=session.email,
            full_name=session.full_name,
            avatar_url=session.avatar_url,
            profile=ProfileRead.model_validate(profile) if profile is not None else None
        )
    except Exception as e:
        logger.error(f"Read session error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load session"
        )

@router.post("/sign-out")
async def sign_out(
    session: Session = Depends(get_session),
    session_service: SessionService = Depends(get_session_service)
):
    """Revoke the current access token"""
    try:
        await session_service.sign_out(session)
        return {"message": "Signed out successfully"}
    except Exception as e:
        logger.error(f"Sign out error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to sign out"
        )
