from sqlalchemy import Column, String, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from socialfeed.db.base import Base

class PostLike(Base):
    __tablename__ = "post_likes"
    
    # At most one row per (post, user); presence is the like state
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("profiles.user_id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    post = relationship("Post", back_populates="likes")
    
    __table_args__ = (
        Index('ix_post_likes_user_id', 'user_id'),
    )
