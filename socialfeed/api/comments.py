from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from socialfeed.db.client import DataClient
from socialfeed.db.session import get_db
from socialfeed.schemas.comment_schema import CommentCreate, ThreadView
from socialfeed.services.comment_service import CommentThread
from socialfeed.services.session_service import Session, get_session
from socialfeed.utils.exceptions import PostNotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/{post_id}/comments", response_model=ThreadView)
async def get_post_comments(
    post_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Comments of a post, oldest first"""
    thread = CommentThread(DataClient(db))
    return await thread.load(post_id)

@router.post("/{post_id}/comments", response_model=ThreadView, status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: str,
    comment_data: CommentCreate,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db)
):
    """Comment on a post; returns the refreshed thread and comment count"""
    try:
        thread = CommentThread(DataClient(db))
        return await thread.add(session, post_id, comment_data.content)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except PostNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    except Exception as e:
        logger.error(f"Error creating comment: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to post comment"
        )
