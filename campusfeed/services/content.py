"""
Content lifecycle: schools, users, posts and comments.

Writes are single-row inserts committed before returning. Post and comment
creation then hand moderation (and for comments, the count increment) to
the background task runner without waiting on either.
"""
from typing import Optional

from sqlalchemy.exc import IntegrityError as DBIntegrityError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..context import AppContext
from ..logging_config import db_logger
from ..models import Comment, Post, School, User
from ..responses import ConflictError, IntegrityError, InternalError, NotFoundError


def _is_unique_violation(exc: DBIntegrityError) -> bool:
    message = str(exc.orig).upper()
    return "UNIQUE" in message or getattr(exc.orig, "pgcode", None) == "23505"


def _is_foreign_key_violation(exc: DBIntegrityError) -> bool:
    message = str(exc.orig).upper()
    return "FOREIGN KEY" in message or getattr(exc.orig, "pgcode", None) == "23503"


def create_school(db: Session, name: str) -> School:
    school = School(name=name)
    try:
        db.add(school)
        db.commit()
    except DBIntegrityError as e:
        db.rollback()
        if _is_unique_violation(e):
            raise ConflictError("School with this name already exists")
        db_logger.error("Failed to create school", error=e)
        raise InternalError("Failed to create school")
    except SQLAlchemyError as e:
        db.rollback()
        db_logger.error("Failed to create school", error=e)
        raise InternalError("Failed to create school")
    db.refresh(school)
    return school


def create_user(db: Session, name: str, school_id: int) -> User:
    user = User(name=name, school_id=school_id)
    try:
        db.add(user)
        db.commit()
    except DBIntegrityError as e:
        db.rollback()
        if _is_foreign_key_violation(e):
            raise IntegrityError("Invalid schoolId")
        db_logger.error("Failed to create user", error=e)
        raise InternalError("Failed to create user")
    except SQLAlchemyError as e:
        db.rollback()
        db_logger.error("Failed to create user", error=e)
        raise InternalError("Failed to create user")
    db.refresh(user)
    return user


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_post(db: Session, post_id: int) -> Optional[Post]:
    return db.get(Post, post_id)


def create_post(
    db: Session,
    ctx: AppContext,
    user: User,
    content: str,
    media_url: Optional[str] = None,
) -> Post:
    """Store a post in the author's school and queue its moderation pass."""
    post = Post(
        user_id=user.id,
        school_id=user.school_id,
        content=content,
        media_url=media_url or None,
        upvotes=0,
        downvotes=0,
        comments_count=0,
    )
    try:
        db.add(post)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        db_logger.error("Failed to create post", error=e, user_id=user.id)
        raise InternalError("Failed to create post")
    db.refresh(post)

    ctx.tasks.submit("moderate_post", ctx.moderation.moderate_post, post.id, content)
    return post


def create_comment(
    db: Session,
    ctx: AppContext,
    user: User,
    post_id: int,
    content: str,
    media_url: Optional[str] = None,
) -> Comment:
    """Store a comment, then queue the count increment and moderation pass."""
    if get_post(db, post_id) is None:
        raise NotFoundError("Post not found")

    comment = Comment(
        post_id=post_id,
        user_id=user.id,
        content=content,
        media_url=media_url or None,
        upvotes=0,
        downvotes=0,
    )
    try:
        db.add(comment)
        db.commit()
    except DBIntegrityError as e:
        # Post retracted between the existence check and the insert
        db.rollback()
        if _is_foreign_key_violation(e):
            raise NotFoundError("Post not found")
        db_logger.error("Failed to create comment", error=e, post_id=post_id)
        raise InternalError("Failed to create comment")
    except SQLAlchemyError as e:
        db.rollback()
        db_logger.error("Failed to create comment", error=e, post_id=post_id)
        raise InternalError("Failed to create comment")
    db.refresh(comment)

    ctx.tasks.submit("increment_comment_count", ctx.counter.increment, post_id)
    ctx.tasks.submit("moderate_comment", ctx.moderation.moderate_comment, comment.id, post_id, content)
    return comment
