from .school import SchoolCreate, SchoolResponse
from .user import UserCreate, UserResponse
from .posts import PostCreate, PostResponse, CommentCreate, CommentResponse, PostDetailResponse
from .feed import FeedResponse

__all__ = [
    "SchoolCreate", "SchoolResponse",
    "UserCreate", "UserResponse",
    "PostCreate", "PostResponse", "CommentCreate", "CommentResponse", "PostDetailResponse",
    "FeedResponse",
]
