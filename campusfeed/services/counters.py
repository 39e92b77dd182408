"""
Comment counter maintenance for the denormalized Post.comments_count.

Updates are relative (+1 / -1) so concurrent increments and retractions
commute; the count converges on the live number of comments once every
queued update has run. An update aimed at a post that no longer exists
touches no rows and is not an error.
"""
from typing import Callable, Dict, Optional

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from ..logging_config import db_logger
from ..models import Comment, Post


class CommentCounter:
    """Applies comment count deltas, each in its own short transaction."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def increment(self, post_id: int) -> bool:
        return self._apply(post_id, 1)

    def decrement(self, post_id: int) -> bool:
        return self._apply(post_id, -1)

    def _apply(self, post_id: int, delta: int) -> bool:
        """Returns False when the post row is gone."""
        with self.session_factory() as db:
            result = db.execute(
                update(Post)
                .where(Post.id == post_id)
                .values(comments_count=Post.comments_count + delta)
            )
            db.commit()

        if result.rowcount == 0:
            db_logger.debug("Comment count update skipped, post gone", post_id=post_id, delta=delta)
            return False
        return True

    def reconcile(self, post_id: int, dry_run: bool = False) -> Optional[int]:
        """
        Recompute one post's comments_count from its live comments.

        Returns:
            The drift that was (or would be) corrected, or None if the post is gone
        """
        with self.session_factory() as db:
            post = db.get(Post, post_id)
            if post is None:
                return None

            live = db.query(func.count(Comment.id)).filter(Comment.post_id == post_id).scalar()
            drift = live - post.comments_count
            if drift and not dry_run:
                post.comments_count = live
                db.commit()
                db_logger.info("Comment count repaired", post_id=post_id, drift=drift, count=live)
            return drift

    def reconcile_all(self, dry_run: bool = False) -> Dict[int, int]:
        """
        Sweep every post and repair any drift.

        Returns:
            Mapping of post id to corrected drift, only for posts that drifted
        """
        with self.session_factory() as db:
            live_counts = dict(
                db.query(Comment.post_id, func.count(Comment.id))
                .group_by(Comment.post_id)
                .all()
            )
            repaired = {}
            for post in db.query(Post).all():
                live = live_counts.get(post.id, 0)
                drift = live - post.comments_count
                if drift:
                    repaired[post.id] = drift
                    if not dry_run:
                        post.comments_count = live
            if repaired and not dry_run:
                db.commit()

        db_logger.info(
            "Comment count sweep finished",
            drifted_posts=len(repaired),
            dry_run=dry_run,
        )
        return repaired
