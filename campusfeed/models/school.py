"""
School model: the scope every user and post belongs to.
"""
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..database import Base


class School(Base):
    __tablename__ = "schools"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)

    # Relationships
    users = relationship("User", back_populates="school")
    posts = relationship("Post", back_populates="school")
