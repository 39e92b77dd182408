from .schools import router as schools_router
from .users import router as users_router
from .posts import router as posts_router
from .comments import router as comments_router
from .feed import router as feed_router
from .health import router as health_router

__all__ = [
    "schools_router",
    "users_router",
    "posts_router",
    "comments_router",
    "feed_router",
    "health_router",
]
