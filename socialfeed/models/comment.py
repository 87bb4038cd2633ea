from sqlalchemy import Column, String, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from socialfeed.db.base import BaseModel

class Comment(BaseModel):
    __tablename__ = "comments"
    
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(String(36), ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    
    post = relationship("Post", back_populates="comments")
    
    __table_args__ = (
        Index('ix_comments_post_id', 'post_id'),
        Index('ix_comments_author_id', 'author_id'),
        Index('ix_comments_created_at', 'created_at'),
    )
