"""
Post model for school timeline content.
"""
from sqlalchemy import BigInteger, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from ..clock import now_ms
from ..database import Base


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        Index("idx_posts_school_created", "school_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    school_id = Column(Integer, ForeignKey("schools.id"), nullable=False)
    content = Column(Text, nullable=False)
    media_url = Column(String(2048), nullable=True)
    created_at = Column(BigInteger, nullable=False, default=now_ms)  # epoch millis
    upvotes = Column(Integer, nullable=False, default=0)
    downvotes = Column(Integer, nullable=False, default=0)
    comments_count = Column(Integer, nullable=False, default=0)  # denormalized, eventually consistent

    # Relationships
    school = relationship("School", back_populates="posts")
    comments = relationship("Comment", back_populates="post", passive_deletes=True)
