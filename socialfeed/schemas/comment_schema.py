from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from socialfeed.schemas.post_schema import ViewState
from socialfeed.schemas.profile_schema import ProfileRead

class CommentCreate(BaseModel):
    content: str = Field(..., max_length=2000)

class CommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    id: str
    post_id: str
    author_id: str
    content: str
    created_at: datetime
    author: Optional[ProfileRead] = None

class ThreadView(BaseModel):
    post_id: str
    state: ViewState = ViewState.IDLE
    comments: List[CommentRead] = []
    comments_count: Optional[int] = None
    error: Optional[str] = None
