"""
Trending Ranker
===============
Scores recent posts by engagement rate, early velocity and recency:

    score = perHourEngagement x velocityBonus x recencyFactor

Worked example: 500 up / 100 down, 5 comments, 2 hours old
1. voteScore = max(|400|, 600 x 0.5) = 400
2. totalEngagement = 400 + 5 x 10 = 450
3. perHourEngagement = 450 / 2 = 225
4. velocityBonus = 1.5 + min(225 / 100, 0.5) = 2.0
5. recencyFactor = exp(-2 / 12) ~ 0.85
6. score ~ 225 x 2.0 x 0.85 ~ 381
"""
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from ..clock import MS_PER_DAY, MS_PER_HOUR, now_ms
from ..models import Post

COMMENT_WEIGHT = 10
CONTROVERSY_WEIGHT = 0.5
MIN_AGE_HOURS = 0.75        # floor so brand-new posts don't divide by ~0
VELOCITY_WINDOW_HOURS = 6
VELOCITY_BASE_BONUS = 1.5
VELOCITY_MAX_EXTRA = 0.5
VELOCITY_SCALE = 100
RECENCY_DECAY_HOURS = 12


@dataclass
class ScoredPost:
    post: Post
    score: float


def trending_score(
    upvotes: int,
    downvotes: int,
    comments_count: int,
    created_at: int,
    now: int,
) -> float:
    """
    Compute the trending score for one post.

    Args:
        upvotes: Up vote count
        downvotes: Down vote count
        comments_count: Live comment count
        created_at: Creation time, epoch millis
        now: Reference time, epoch millis

    Returns:
        Non-negative score; higher ranks first
    """
    hours_old = (now - created_at) / MS_PER_HOUR

    # Polarized (1000/0) and controversial (1000/1000) posts both score high
    vote_count = upvotes - downvotes
    total_vote_engagement = upvotes + downvotes
    vote_score = max(abs(vote_count), total_vote_engagement * CONTROVERSY_WEIGHT)

    total_engagement = vote_score + comments_count * COMMENT_WEIGHT

    per_hour_engagement = total_engagement / max(hours_old, MIN_AGE_HOURS)

    velocity_bonus = 1.0
    if hours_old < VELOCITY_WINDOW_HOURS:
        velocity_bonus = VELOCITY_BASE_BONUS + min(per_hour_engagement / VELOCITY_SCALE, VELOCITY_MAX_EXTRA)

    recency_factor = math.exp(-hours_old / RECENCY_DECAY_HOURS)

    return per_hour_engagement * velocity_bonus * recency_factor


def score_post(post: Post, now: int) -> float:
    return trending_score(
        post.upvotes or 0,
        post.downvotes or 0,
        post.comments_count or 0,
        post.created_at,
        now,
    )


def rank_posts(posts: Iterable[Post], now: Optional[int] = None) -> List[ScoredPost]:
    """Score every post and order by score descending, then id descending."""
    now = now_ms() if now is None else now
    scored = [ScoredPost(post=p, score=score_post(p, now)) for p in posts]
    scored.sort(key=lambda sp: (sp.score, sp.post.id), reverse=True)
    return scored


def window_posts(db: Session, school_id: int, window_days: int, now: int) -> List[Post]:
    """All of a school's posts created within the lookback window."""
    cutoff = now - window_days * MS_PER_DAY
    return (
        db.query(Post)
        .filter(Post.school_id == school_id, Post.created_at >= cutoff)
        .order_by(Post.created_at.desc())
        .all()
    )


def trending_posts(db: Session, school_id: int, window_days: int = 7, now: Optional[int] = None) -> List[Post]:
    """Every post in the window, best trending score first."""
    now = now_ms() if now is None else now
    return [sp.post for sp in rank_posts(window_posts(db, school_id, window_days, now), now)]
