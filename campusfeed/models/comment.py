"""
Comment model. Rows cascade away with their parent post.
"""
from sqlalchemy import BigInteger, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from ..clock import now_ms
from ..database import Base


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (
        Index("idx_comments_post_created", "post_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    media_url = Column(String(2048), nullable=True)
    created_at = Column(BigInteger, nullable=False, default=now_ms)  # epoch millis
    upvotes = Column(Integer, nullable=False, default=0)
    downvotes = Column(Integer, nullable=False, default=0)

    # Relationships
    post = relationship("Post", back_populates="comments")
