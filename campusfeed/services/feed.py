"""
Feed assembly for the newest and trending views.
"""
from typing import Optional

from sqlalchemy.orm import Session

from ..logging_config import get_logger, timed
from ..schemas import FeedResponse, PostResponse
from .pagination import paginate_posts
from .trending import trending_posts

logger = get_logger("feed")


def newest_feed(
    db: Session,
    school_id: int,
    limit: int,
    cursor: Optional[int] = None,
) -> FeedResponse:
    """Reverse-chronological page of a school's posts."""
    page = paginate_posts(db, school_id, limit, cursor)
    return FeedResponse(
        posts=[PostResponse.model_validate(p) for p in page.items],
        next_cursor=page.next_cursor,
        has_more=page.has_more,
    )


@timed(logger)
def trending_feed(
    db: Session,
    school_id: int,
    window_days: int = 7,
    now: Optional[int] = None,
) -> FeedResponse:
    """Every post in the lookback window, ranked; never paginated."""
    posts = trending_posts(db, school_id, window_days, now)
    return FeedResponse(
        posts=[PostResponse.model_validate(p) for p in posts],
        next_cursor=None,
        has_more=False,
    )
