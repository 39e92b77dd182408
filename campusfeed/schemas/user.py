from pydantic import BaseModel, Field
from typing import Any

from .base import CamelModel


class UserCreate(BaseModel):
    name: Any = None
    school_id: Any = Field(default=None, alias="schoolId")


class UserResponse(CamelModel):
    id: int
    name: str
    school_id: int
    created_at: int
