from typing import Iterable, Optional
import logging

from socialfeed.db.client import DataClient
from socialfeed.models.post import Post
from socialfeed.models.like import PostLike
from socialfeed.schemas.like_schema import LikeState, LikeStatus
from socialfeed.services.session_service import Session
from socialfeed.utils.exceptions import (
    DuplicateRowError,
    EmptyContentError,
    NotPostOwnerError,
    PostNotFoundError,
)

logger = logging.getLogger(__name__)


class LikeCounter:
    """Like button state for one rendered post.

    `toggle` applies the optimistic transition (state flips, count moves by
    exactly one); `reconcile` replaces both with what the backend reported.
    """

    def __init__(self, state: LikeState, count: int):
        self.state = state
        self.count = count

    @classmethod
    def seed(cls, user_id: Optional[str], liker_ids: Iterable[str], likes_count: int) -> "LikeCounter":
        liked = user_id is not None and user_id in set(liker_ids)
        return cls(LikeState.from_flag(liked), likes_count)

    @property
    def liked(self) -> bool:
        return self.state == LikeState.LIKED

    def toggle(self) -> LikeState:
        if self.liked:
            self.state = LikeState.NOT_LIKED
            self.count -= 1
        else:
            self.state = LikeState.LIKED
            self.count += 1
        return self.state

    def reconcile(self, status: LikeStatus) -> None:
        self.state = status.state
        self.count = status.likes_count


class PostInteraction:
    def __init__(self, client: DataClient):
        self.client = client

    async def _get_post(self, post_id: str) -> Post:
        post = await self.client.get(Post, id=post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    async def _get_owned_post(self, session: Session, post_id: str) -> Post:
        post = await self._get_post(post_id)
        if post.user_id != session.user_id:
            raise NotPostOwnerError(post_id)
        return post

    async def like_state(self, session: Session, post_id: str) -> LikeState:
        """The PostLike row for (post, user) is the only source of truth"""
        row = await self.client.get(PostLike, post_id=post_id, user_id=session.user_id)
        return LikeState.from_flag(row is not None)

    async def like(self, session: Session, post_id: str) -> LikeStatus:
        await self._get_post(post_id)

        if await self.like_state(session, post_id) == LikeState.NOT_LIKED:
            try:
                await self.client.insert(PostLike, commit=False, post_id=post_id, user_id=session.user_id)
            except DuplicateRowError:
                # Only a concurrent insert of the same row counts as liked;
                # any other constraint failure (no profile, post gone) stands
                if not await self.client.count(PostLike, post_id=post_id, user_id=session.user_id):
                    raise
                logger.info(f"Post {post_id} already liked by {session.user_id}")

        likes_count = await self.client.recount_likes(post_id)
        logger.info(f"User {session.user_id} liked post {post_id}")
        return LikeStatus(post_id=post_id, state=LikeState.LIKED, likes_count=likes_count)

    async def unlike(self, session: Session, post_id: str) -> LikeStatus:
        await self._get_post(post_id)

        await self.client.delete(PostLike, commit=False, post_id=post_id, user_id=session.user_id)
        likes_count = await self.client.recount_likes(post_id)
        logger.info(f"User {session.user_id} unliked post {post_id}")
        return LikeStatus(post_id=post_id, state=LikeState.NOT_LIKED, likes_count=likes_count)

    async def toggle_like(self, session: Session, post_id: str) -> LikeStatus:
        """Flip the like state; the returned status is read back after the write"""
        if await self.like_state(session, post_id) == LikeState.LIKED:
            return await self.unlike(session, post_id)
        return await self.like(session, post_id)

    async def edit_post(self, session: Session, post_id: str, content: Optional[str]) -> Post:
        """Replace the content of an owned post; image and timestamps are left alone"""
        text = (content or "").strip()
        if not text:
            raise EmptyContentError("Post content")

        await self._get_owned_post(session, post_id)
        post = await self.client.update(Post, {"content": text}, id=post_id)
        if post is None:
            raise PostNotFoundError(post_id)

        logger.info(f"User {session.user_id} edited post {post_id}")
        return post

    async def delete_post(self, session: Session, post_id: str) -> None:
        """Delete an owned post together with its likes and comments"""
        await self._get_owned_post(session, post_id)
        await self.client.delete(Post, id=post_id)
        logger.info(f"User {session.user_id} deleted post {post_id}")
