from pydantic import BaseModel
from typing import List, Optional

from .posts import PostResponse


class FeedResponse(BaseModel):
    posts: List[PostResponse] = []
    next_cursor: Optional[str] = None
    has_more: bool = False
    preload_hint: Optional[str] = None
