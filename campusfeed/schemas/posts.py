from pydantic import BaseModel, Field
from typing import Any, List, Optional

from .base import CamelModel


class PostCreate(BaseModel):
    content: Any = None
    media_url: Optional[str] = Field(default=None, alias="mediaUrl")


class PostResponse(CamelModel):
    id: int
    user_id: int
    school_id: int
    content: str
    media_url: Optional[str] = None
    created_at: int
    upvotes: int
    downvotes: int
    comments_count: int


class CommentCreate(BaseModel):
    post_id: Any = Field(default=None, alias="postId")
    content: Any = None
    media_url: Optional[str] = Field(default=None, alias="mediaUrl")


class CommentResponse(CamelModel):
    id: int
    post_id: int
    user_id: int
    content: str
    media_url: Optional[str] = None
    created_at: int
    upvotes: int
    downvotes: int


class PostDetailResponse(PostResponse):
    """A post merged with one page of its comments."""
    comments: List[CommentResponse] = []
    comments_next_cursor: Optional[str] = Field(default=None, alias="comments_next_cursor")
    comments_has_more: bool = Field(default=False, alias="comments_has_more")
