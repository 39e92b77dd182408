"""
Application context: every long-lived collaborator, built once per process.

Lifecycle: construct -> start() -> serve requests -> shutdown()
"""
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from . import models  # noqa: F401  (registers tables on Base.metadata)
from .config import Settings
from .database import Base, make_engine, make_session_factory
from .limiter import RateLimiter
from .logging_config import get_logger
from .services.counters import CommentCounter
from .worker.moderation import ContentClassifier, ModerationPipeline, OpenAIContentClassifier
from .worker.tasks import TaskRunner

logger = get_logger("context")


class AppContext:
    """Holds the store, rate limiter, classifier and background workers"""

    def __init__(
        self,
        settings: Settings,
        engine: Optional[Engine] = None,
        classifier: Optional[ContentClassifier] = None,
        rate_limiter: Optional[RateLimiter] = None,
        tasks: Optional[TaskRunner] = None,
    ):
        self.settings = settings
        self.engine = engine or make_engine(settings.database_url)
        self.session_factory: sessionmaker = make_session_factory(self.engine)
        self.rate_limiter = rate_limiter or RateLimiter(
            storage_url=settings.rate_limit_storage_url,
            requests=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
        self.tasks = tasks or TaskRunner(workers=settings.task_workers)
        self.counter = CommentCounter(self.session_factory)
        if classifier is None:
            classifier = OpenAIContentClassifier.from_settings(settings)
        self.moderation = ModerationPipeline(self.session_factory, self.counter, classifier)
        self.started = False

    def start(self):
        Base.metadata.create_all(bind=self.engine)
        self.rate_limiter.connect()
        self.tasks.start_background()
        self.started = True
        logger.info(
            "Application context started",
            environment=self.settings.environment,
            moderation=self.moderation.classifier is not None,
            rate_limiting=self.rate_limiter.enabled,
        )

    def shutdown(self):
        self.tasks.stop(drain=True)
        self.rate_limiter.close()
        self.engine.dispose()
        self.started = False
        logger.info("Application context stopped")

    def check_database(self) -> dict:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {"status": "healthy"}
        except Exception as e:
            return {"status": "unhealthy", "error": str(e)}
