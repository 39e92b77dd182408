"""
User routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..responses import NotFoundError, ValidationError, parse_path_id, require, require_int
from ..schemas import UserCreate, UserResponse
from ..services import content

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """Create a user belonging to an existing school."""
    name = require(user_data.name, "name")
    if not isinstance(name, str):
        raise ValidationError("name must be a string")
    if user_data.school_id is None:
        raise ValidationError("schoolId is required")
    school_id = require_int(user_data.school_id, "schoolId")
    return content.create_user(db, name, school_id)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db)):
    """Get a user by ID."""
    user = content.get_user(db, parse_path_id(user_id, "Invalid user ID"))
    if not user:
        raise NotFoundError("User not found")
    return user
