from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from socialfeed.db.client import DataClient
from socialfeed.db.session import get_db
from socialfeed.schemas.like_schema import LikeStatus
from socialfeed.services.interaction_service import PostInteraction
from socialfeed.services.session_service import Session, get_session
from socialfeed.utils.exceptions import PostNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()

async def _apply(action: str, post_id: str, session: Session, db: AsyncSession) -> LikeStatus:
    try:
        interaction = PostInteraction(DataClient(db))
        return await getattr(interaction, action)(session, post_id)
    except PostNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    except Exception as e:
        logger.error(f"Error during {action} on post {post_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update like"
        )

@router.post("/{post_id}/like/toggle", response_model=LikeStatus)
async def toggle_like(
    post_id: str,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db)
):
    """Like the post if not liked yet, otherwise remove the like"""
    return await _apply("toggle_like", post_id, session, db)

@router.put("/{post_id}/like", response_model=LikeStatus)
async def like_post(
    post_id: str,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db)
):
    """Like a post"""
    return await _apply("like", post_id, session, db)

@router.delete("/{post_id}/like", response_model=LikeStatus)
async def unlike_post(
    post_id: str,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db)
):
    """Remove your like from a post"""
    return await _apply("unlike", post_id, session, db)
