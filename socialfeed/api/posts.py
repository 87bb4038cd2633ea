from fastapi import APIRouter, Depends, HTTPException, status, Form, UploadFile, File
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from socialfeed.db.client import DataClient
from socialfeed.db.session import get_db
from socialfeed.schemas.post_schema import FeedPost, PostRead, PostUpdate
from socialfeed.services.composer_service import PostComposer
from socialfeed.services.feed_service import FeedService
from socialfeed.services.interaction_service import PostInteraction
from socialfeed.services.session_service import Session, get_optional_session, get_session
from socialfeed.services.storage_service import ImageUpload, StorageService, get_storage
from socialfeed.utils.exceptions import (
    NotPostOwnerError,
    PostNotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    content: str = Form(""),
    image: Optional[UploadFile] = File(None),
    session: Session = Depends(get_session),
    storage: StorageService = Depends(get_storage),
    db: AsyncSession = Depends(get_db)
):
    """Create a post with text and an optional image"""
    try:
        upload = None
        # Browsers send an empty part when no file was picked
        if image is not None and image.filename:
            upload = ImageUpload(
                filename=image.filename,
                data=await image.read(),
                content_type=image.content_type
            )

        composer = PostComposer(DataClient(db), storage)
        return await composer.submit(session, content, upload)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except StorageError as e:
        logger.error(f"Image upload error: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to upload image"
        )
    except Exception as e:
        logger.error(f"Create post error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create post"
        )

@router.get("/{post_id}", response_model=FeedPost)
async def get_post(
    post_id: str,
    session: Optional[Session] = Depends(get_optional_session),
    db: AsyncSession = Depends(get_db)
):
    """Get a single post with its author and likes"""
    try:
        post = await FeedService(DataClient(db)).get_post(post_id, session)
        if post is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Post not found"
            )
        return post
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Get post error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get post"
        )

@router.patch("/{post_id}", response_model=PostRead)
async def update_post(
    post_id: str,
    post_update: PostUpdate,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db)
):
    """Edit the content of your own post"""
    try:
        interaction = PostInteraction(DataClient(db))
        return await interaction.edit_post(session, post_id, post_update.content)
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
    except NotPostOwnerError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to update this post"
        )
    except Exception as e:
        logger.error(f"Update post error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update post"
        )

@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    session: Session = Depends(get_session),
    db: AsyncSession = Depends(get_db)
):
    """Delete your own post"""
    try:
        interaction = PostInteraction(DataClient(db))
        await interaction.delete_post(session, post_id)
        return {"message": "Post deleted successfully"}
    except PostNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    except NotPostOwnerError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to delete this post"
        )
    except Exception as e:
        logger.error(f"Delete post error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete post"
        )
