from pydantic import BaseModel, ConfigDict
from typing import Optional

class ProfileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    user_id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

class SessionRead(BaseModel):
    """Current identity as seen by the client"""
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    profile: Optional[ProfileRead] = None
