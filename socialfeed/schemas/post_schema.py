from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum

from socialfeed.schemas.profile_schema import ProfileRead

class ViewState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"

class PostUpdate(BaseModel):
    content: str = Field(..., max_length=5000)

class PostRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    id: str
    user_id: str
    content: str
    image_url: Optional[str] = None
    likes_count: int = 0
    comments_count: int = 0
    created_at: datetime

class PostLikeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    post_id: str
    user_id: str

class FeedPost(PostRead):
    author: Optional[ProfileRead] = None
    post_likes: List[PostLikeRead] = []
    liked_by_me: bool = False

class FeedView(BaseModel):
    state: ViewState = ViewState.IDLE
    posts: List[FeedPost] = []
    placeholder: Optional[str] = None
    error: Optional[str] = None
