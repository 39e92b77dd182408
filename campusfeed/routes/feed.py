"""
Feed routes: newest (cursor paginated) and trending (ranked window).
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_acting_user
from ..models.user import User
from ..responses import parse_cursor, parse_page_size
from ..schemas import FeedResponse
from ..services.feed import newest_feed, trending_feed

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("/newest", response_model=FeedResponse)
def get_newest_feed(
    request: Request,
    limit: Optional[str] = None,
    cursor: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_acting_user),
):
    """Newest posts in the caller's school."""
    settings = request.app.state.context.settings
    page_size = parse_page_size(limit, settings.feed_default_page_size, settings.feed_max_page_size)
    cursor_ts = parse_cursor(cursor)

    feed = newest_feed(db, current_user.school_id, page_size, cursor_ts)
    if feed.next_cursor:
        feed.preload_hint = (
            f"/feed/newest?userId={current_user.id}&limit={page_size}&cursor={feed.next_cursor}"
        )
    return feed


@router.get("/trending", response_model=FeedResponse)
def get_trending_feed(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_acting_user),
):
    """Trending posts from the caller's school over the lookback window."""
    settings = request.app.state.context.settings
    return trending_feed(db, current_user.school_id, settings.trending_window_days)
