from sqlalchemy import Column, String, DateTime
from datetime import datetime
from socialfeed.db.base import Base

class Profile(Base):
    """Public display identity, created by the identity provider on sign-up."""
    __tablename__ = "profiles"
    
    user_id = Column(String(36), primary_key=True)
    full_name = Column(String(100))
    avatar_url = Column(String(500))
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
