"""
Pytest configuration and fixtures for Campus Feed API tests.
"""
import pytest
from fastapi.testclient import TestClient

from campusfeed.clock import now_ms
from campusfeed.config import Settings
from campusfeed.context import AppContext
from campusfeed.database import Base
from campusfeed.main import create_app
from campusfeed.models import Comment, Post, School, User
from campusfeed.worker.moderation import ModerationVerdict


class FakeClassifier:
    """Flags any text containing one of its terms; records every call."""

    def __init__(self, flagged_terms=("forbidden",)):
        self.flagged_terms = flagged_terms
        self.calls = []

    def classify(self, text):
        self.calls.append(text)
        if any(term in text.lower() for term in self.flagged_terms):
            return ModerationVerdict(flagged=True, category="test_category")
        return ModerationVerdict.clear()


@pytest.fixture(scope="function")
def settings(tmp_path):
    """Settings against a throwaway SQLite file with rate limiting off."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'campusfeed-test.db'}",
        rate_limit_storage_url="",
        moderation_enabled=False,
        task_workers=1,
    )


@pytest.fixture(scope="function")
def classifier():
    return FakeClassifier()


@pytest.fixture(scope="function")
def context(settings, classifier):
    """An application context that is not started (tasks run on join)."""
    ctx = AppContext(settings, classifier=classifier)
    Base.metadata.create_all(bind=ctx.engine)
    yield ctx
    ctx.engine.dispose()


@pytest.fixture(scope="function")
def db(context):
    """A session on the test store."""
    session = context.session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(settings, context):
    """Create a test client; the lifespan starts the background workers."""
    app = create_app(settings, context)
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def school(db):
    school = School(name="Test University")
    db.add(school)
    db.commit()
    db.refresh(school)
    return school


@pytest.fixture(scope="function")
def test_user(db, school):
    """Create a test user."""
    user = User(name="Test User", school_id=school.id)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def make_post(db, test_user):
    """Factory inserting posts directly, with full control over timestamps and votes."""
    def _make_post(content="a post", created_at=None, upvotes=0, downvotes=0, comments_count=0, user=None):
        author = user or test_user
        post = Post(
            user_id=author.id,
            school_id=author.school_id,
            content=content,
            created_at=created_at if created_at is not None else now_ms(),
            upvotes=upvotes,
            downvotes=downvotes,
            comments_count=comments_count,
        )
        db.add(post)
        db.commit()
        db.refresh(post)
        return post

    return _make_post


@pytest.fixture(scope="function")
def make_comment(db, test_user):
    """Factory inserting comments directly (does not touch comments_count)."""
    def _make_comment(post, content="a comment", created_at=None):
        comment = Comment(
            post_id=post.id,
            user_id=test_user.id,
            content=content,
            created_at=created_at if created_at is not None else now_ms(),
        )
        db.add(comment)
        db.commit()
        db.refresh(comment)
        return comment

    return _make_comment
