from sqlalchemy import Column, String, Text, Integer, ForeignKey, Index
from sqlalchemy.orm import relationship
from socialfeed.db.base import BaseModel

class Post(BaseModel):
    __tablename__ = "posts"
    
    user_id = Column(String(36), ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False, default="")
    image_url = Column(String(500))
    
    # Deleting a post takes its likes and comments with it
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")
    likes = relationship("PostLike", back_populates="post", cascade="all, delete-orphan")
    
    # Denormalized counts, recomputed from the join rows on every mutation
    likes_count = Column(Integer, default=0, nullable=False)
    comments_count = Column(Integer, default=0, nullable=False)
    
    __table_args__ = (
        Index('ix_posts_user_id', 'user_id'),
        Index('ix_posts_created_at', 'created_at'),
    )
