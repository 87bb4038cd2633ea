from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from socialfeed.db.client import DataClient
from socialfeed.db.session import get_db
from socialfeed.schemas.post_schema import FeedView
from socialfeed.services.feed_service import FeedService
from socialfeed.services.session_service import Session, get_optional_session

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=FeedView)
async def get_feed(
    session: Optional[Session] = Depends(get_optional_session),
    db: AsyncSession = Depends(get_db)
):
    """All posts, newest first, with authors and the viewer's likes.

    Read failures come back as an empty feed in the error state rather than a 5xx.
    """
    feed_service = FeedService(DataClient(db))
    return await feed_service.load_feed(session)
