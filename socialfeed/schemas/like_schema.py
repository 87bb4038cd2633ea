from pydantic import BaseModel
from enum import Enum

class LikeState(str, Enum):
    NOT_LIKED = "not_liked"
    LIKED = "liked"

    @classmethod
    def from_flag(cls, liked: bool) -> "LikeState":
        return cls.LIKED if liked else cls.NOT_LIKED

class LikeStatus(BaseModel):
    """Like state of one post for the current user, read back after the mutation"""
    post_id: str
    state: LikeState
    likes_count: int

    @property
    def liked(self) -> bool:
        return self.state == LikeState.LIKED
