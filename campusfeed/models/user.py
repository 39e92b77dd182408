"""
User model for content ownership.
"""
from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from ..clock import now_ms
from ..database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    school_id = Column(Integer, ForeignKey("schools.id"), nullable=False, index=True)
    created_at = Column(BigInteger, nullable=False, default=now_ms)

    # Relationships
    school = relationship("School", back_populates="users")
