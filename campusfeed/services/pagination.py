"""
Cursor pagination over reverse-chronological lists.

A cursor is the createdAt (epoch millis) of the last item on the previous
page, rendered as a string. Pages are exclusive of the cursor, so walking
next_cursor until has_more is false visits every row created before the
first request exactly once. Rows sharing a createdAt are ordered by id
descending; a page boundary that falls inside such a tie drops the rest of
the tie, since the cursor carries only the timestamp.
"""
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from sqlalchemy.orm import Query, Session

from ..models import Comment, Post

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of a descending time-ordered list"""
    items: List[T] = field(default_factory=list)
    next_cursor: Optional[str] = None
    has_more: bool = False


def paginate(query: Query, created_at_column, id_column, limit: int, cursor: Optional[int] = None) -> Page:
    """
    Apply the L+1 fetch to a scoped query.

    Args:
        query: Query already filtered to the scope (school, post, ...)
        created_at_column: Column ordered descending and compared to the cursor
        id_column: Secondary ordering key for equal timestamps
        limit: Page size L
        cursor: Exclusive upper bound on created_at, or None for the first page

    Returns:
        Page with at most `limit` items
    """
    if cursor is not None:
        query = query.filter(created_at_column < cursor)

    rows = (
        query.order_by(created_at_column.desc(), id_column.desc())
        .limit(limit + 1)
        .all()
    )

    has_more = len(rows) > limit
    items = rows[:limit]
    next_cursor = str(items[-1].created_at) if items else None

    return Page(items=items, next_cursor=next_cursor, has_more=has_more)


def paginate_posts(db: Session, school_id: int, limit: int, cursor: Optional[int] = None) -> Page[Post]:
    """Newest-first page of a school's posts."""
    query = db.query(Post).filter(Post.school_id == school_id)
    return paginate(query, Post.created_at, Post.id, limit, cursor)


def paginate_comments(db: Session, post_id: int, limit: int, cursor: Optional[int] = None) -> Page[Comment]:
    """Newest-first page of a post's comments."""
    query = db.query(Comment).filter(Comment.post_id == post_id)
    return paginate(query, Comment.created_at, Comment.id, limit, cursor)
