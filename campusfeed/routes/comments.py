"""
Comment routes.
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_acting_user
from ..models.user import User
from ..responses import require_int, validate_content
from ..schemas import CommentCreate, CommentResponse
from ..services import content

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_comment(
    request: Request,
    comment_data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_acting_user),
):
    """Comment on a post. The post's count and moderation update afterwards."""
    ctx = request.app.state.context
    text = validate_content(comment_data.content, ctx.settings.content_max_length)
    post_id = require_int(comment_data.post_id, "postId")
    return content.create_comment(db, ctx, current_user, post_id, text, comment_data.media_url)
