from typing import List
import logging

from socialfeed.db.client import DataClient
from socialfeed.models.comment import Comment
from socialfeed.models.post import Post
from socialfeed.schemas.comment_schema import CommentRead, ThreadView
from socialfeed.schemas.post_schema import ViewState
from socialfeed.schemas.profile_schema import ProfileRead
from socialfeed.services.profile_service import ProfileService
from socialfeed.services.session_service import Session
from socialfeed.utils.exceptions import DataAccessError, EmptyContentError, PostNotFoundError

logger = logging.getLogger(__name__)

class CommentThread:
    """Comments of a single post, oldest first"""

    def __init__(self, client: DataClient):
        self.client = client
        self.profiles = ProfileService(client)

    async def load(self, post_id: str) -> ThreadView:
        try:
            comments = await self.fetch_comments(post_id)
        except DataAccessError as e:
            logger.error(f"Error fetching comments for post {post_id}: {e}")
            return ThreadView(post_id=post_id, state=ViewState.ERROR, error="Failed to load comments")

        return ThreadView(post_id=post_id, state=ViewState.LOADED, comments=comments)

    async def fetch_comments(self, post_id: str) -> List[CommentRead]:
        comments = await self.client.select(
            Comment,
            filters={"post_id": post_id},
            order_by="created_at",
            ascending=True
        )
        if not comments:
            return []

        profiles = await self.profiles.profiles_by_id(comment.author_id for comment in comments)

        thread = []
        for comment in comments:
            author = profiles.get(comment.author_id)
            thread.append(CommentRead(
                id=comment.id,
                post_id=comment.post_id,
                author_id=comment.author_id,
                content=comment.content,
                created_at=comment.created_at,
                author=ProfileRead.model_validate(author) if author is not None else None,
            ))
        return thread

    async def add(self, session: Session, post_id: str, content: str) -> ThreadView:
        """Append a comment, then return the re-fetched thread with the post's new comment count"""
        text = (content or "").strip()
        if not text:
            raise EmptyContentError("Comment")

        post = await self.client.get(Post, id=post_id)
        if post is None:
            raise PostNotFoundError(post_id)

        comment = await self.client.insert(
            Comment,
            commit=False,
            content=text,
            post_id=post_id,
            author_id=session.user_id
        )
        comments_count = await self.client.recount_comments(post_id)
        logger.info(f"User {session.user_id} created comment {comment.id} on post {post_id}")

        thread = await self.load(post_id)
        thread.comments_count = comments_count
        return thread
