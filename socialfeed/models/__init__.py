"""
Models package for Social Feed API
"""
from socialfeed.db.base import Base, BaseModel
from socialfeed.models.profile import Profile
from socialfeed.models.post import Post
from socialfeed.models.comment import Comment
from socialfeed.models.like import PostLike

__all__ = [
    'Base',
    'BaseModel',
    'Profile',
    'Post',
    'Comment',
    'PostLike',
]
