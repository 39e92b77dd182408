"""
School routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..responses import ValidationError, require
from ..schemas import SchoolCreate, SchoolResponse
from ..services import content

router = APIRouter(prefix="/schools", tags=["schools"])


@router.post("", response_model=SchoolResponse, status_code=status.HTTP_201_CREATED)
def create_school(school_data: SchoolCreate, db: Session = Depends(get_db)):
    """Create a school; names are unique."""
    name = require(school_data.name, "name")
    if not isinstance(name, str):
        raise ValidationError("name must be a string")
    return content.create_school(db, name)
