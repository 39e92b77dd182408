"""
Post routes: creation and the post detail view with paginated comments.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_acting_user
from ..models.user import User
from ..responses import NotFoundError, parse_cursor, parse_page_size, parse_path_id, validate_content
from ..schemas import CommentResponse, PostCreate, PostDetailResponse, PostResponse
from ..services import content
from ..services.pagination import paginate_comments

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    request: Request,
    post_data: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_acting_user),
):
    """Create a post in the author's school. Moderation runs afterwards."""
    ctx = request.app.state.context
    text = validate_content(post_data.content, ctx.settings.content_max_length)
    return content.create_post(db, ctx, current_user, text, post_data.media_url)


@router.get("/{post_id}", response_model=PostDetailResponse)
def get_post(
    request: Request,
    post_id: str,
    limit: Optional[str] = None,
    cursor: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Get a post merged with one page of its comments, newest first."""
    post_id = parse_path_id(post_id, "Invalid post ID")

    settings = request.app.state.context.settings
    page_size = parse_page_size(limit, settings.feed_default_page_size, settings.feed_max_page_size)
    cursor_ts = parse_cursor(cursor)

    post = content.get_post(db, post_id)
    if not post:
        raise NotFoundError("Post not found")

    page = paginate_comments(db, post.id, page_size, cursor_ts)
    return PostDetailResponse(
        **PostResponse.model_validate(post).model_dump(),
        comments=[CommentResponse.model_validate(c) for c in page.items],
        comments_next_cursor=page.next_cursor,
        comments_has_more=page.has_more,
    )
