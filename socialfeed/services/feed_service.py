from typing import List, Optional
import logging

from socialfeed.db.client import DataClient
from socialfeed.models.post import Post
from socialfeed.models.like import PostLike
from socialfeed.models.profile import Profile
from socialfeed.schemas.post_schema import FeedPost, FeedView, PostLikeRead, ViewState
from socialfeed.schemas.profile_schema import ProfileRead
from socialfeed.services.profile_service import ProfileService
from socialfeed.services.session_service import Session
from socialfeed.utils.exceptions import DataAccessError
from socialfeed.utils.joins import group_by

logger = logging.getLogger(__name__)

EMPTY_FEED_MESSAGE = "No posts yet. Be the first to share something!"

class FeedService:
    def __init__(self, client: DataClient):
        self.client = client
        self.profiles = ProfileService(client)

    async def load_feed(self, session: Optional[Session]) -> FeedView:
        """Load every post newest first, joined to its author and the viewer's likes.

        A failed read is logged and degrades to an empty feed in the error state.
        """
        try:
            posts = await self.fetch_posts(session)
        except DataAccessError as e:
            logger.error(f"Error fetching posts: {e}")
            return FeedView(state=ViewState.ERROR, posts=[], error="Failed to load posts")

        if not posts:
            return FeedView(state=ViewState.LOADED, posts=[], placeholder=EMPTY_FEED_MESSAGE)

        return FeedView(state=ViewState.LOADED, posts=posts)

    async def fetch_posts(self, session: Optional[Session]) -> List[FeedPost]:
        posts = await self.client.select(Post, order_by="created_at", ascending=False)
        if not posts:
            return []

        profiles = await self.profiles.profiles_by_id(post.user_id for post in posts)

        likes_by_post = {}
        if session is not None:
            likes = await self.client.select_in(PostLike, "post_id", [post.id for post in posts])
            likes_by_post = group_by(likes, "post_id")

        return [
            self.assemble(post, profiles.get(post.user_id), likes_by_post.get(post.id, []), session)
            for post in posts
        ]

    def assemble(self, post: Post, author: Optional[Profile], likes: List[PostLike], session: Optional[Session]) -> FeedPost:
        post_likes = [PostLikeRead.model_validate(like) for like in likes]
        return FeedPost(
            id=post.id,
            user_id=post.user_id,
            content=post.content,
            image_url=post.image_url,
            likes_count=post.likes_count,
            comments_count=post.comments_count,
            created_at=post.created_at,
            author=ProfileRead.model_validate(author) if author is not None else None,
            post_likes=post_likes,
            liked_by_me=session is not None and any(like.user_id == session.user_id for like in post_likes),
        )

    async def get_post(self, post_id: str, session: Optional[Session]) -> Optional[FeedPost]:
        """Single post with the same joins as the feed"""
        post = await self.client.get(Post, id=post_id)
        if post is None:
            return None

        author = await self.profiles.get_profile(post.user_id)
        likes = []
        if session is not None:
            likes = await self.client.select(PostLike, filters={"post_id": post.id})
        return self.assemble(post, author, likes, session)
