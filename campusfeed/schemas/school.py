from pydantic import BaseModel
from typing import Any

from .base import CamelModel


class SchoolCreate(BaseModel):
    name: Any = None


class SchoolResponse(CamelModel):
    id: int
    name: str
