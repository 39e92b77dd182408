from .school import School
from .user import User
from .post import Post
from .comment import Comment

__all__ = [
    "School",
    "User",
    "Post",
    "Comment",
]
