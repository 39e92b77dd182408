"""
Per-user fixed-window rate limiting.

Counters live in a shared store (Redis in production) and are keyed by
user id and the clock-aligned window they fall in. Limiting fails open:
if the store can't be reached at startup, or errors on a request, the
request goes through unthrottled.
"""
import time
from dataclasses import dataclass
from typing import Dict, Optional

from limits import RateLimitItemPerSecond
from limits.storage import Storage, storage_from_string
from limits.strategies import FixedWindowRateLimiter

from .logging_config import get_logger

logger = get_logger("ratelimit")


@dataclass
class RateLimitStatus:
    """Result of counting one request against a user's window"""
    allowed: bool
    limit: int
    remaining: int
    reset: int  # epoch seconds when the window closes

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset),
        }


class RateLimiter:
    """Fixed window limiter; construct -> connect -> check -> close"""

    def __init__(
        self,
        storage_url: str = "",
        requests: int = 20,
        window_seconds: int = 60,
        storage: Optional[Storage] = None,
    ):
        self.storage_url = storage_url
        self.requests = requests
        self.window_seconds = window_seconds
        self.item = RateLimitItemPerSecond(requests, window_seconds)
        self.storage = storage
        self.strategy: Optional[FixedWindowRateLimiter] = None
        self.enabled = False

    def connect(self) -> bool:
        """Open the counter store; on failure limiting stays disabled"""
        if self.storage is None:
            if not self.storage_url:
                logger.info("Rate limit store not configured, rate limiting disabled")
                return False
            try:
                self.storage = storage_from_string(self.storage_url)
            except Exception as e:
                logger.warning("Rate limit store unavailable, rate limiting disabled", error_message=str(e))
                return False

        if not self.storage.check():
            logger.warning("Rate limit store unreachable, rate limiting disabled", url=self.storage_url)
            return False

        self.strategy = FixedWindowRateLimiter(self.storage)
        self.enabled = True
        logger.info("Rate limiting enabled", limit=self.requests, window_seconds=self.window_seconds)
        return True

    def close(self):
        self.enabled = False
        self.strategy = None

    def window_start(self, now: Optional[float] = None) -> int:
        now = int(time.time() if now is None else now)
        return now - now % self.window_seconds

    def hit(self, user_id: str, now: Optional[float] = None) -> Optional[RateLimitStatus]:
        """
        Count one request for a user.

        Returns:
            The window status, or None when limiting is off or the store failed
        """
        if not self.enabled or self.strategy is None:
            return None

        window_start = self.window_start(now)
        reset = window_start + self.window_seconds
        identifiers = ("user", str(user_id), str(window_start))

        try:
            allowed = self.strategy.hit(self.item, *identifiers)
            stats = self.strategy.get_window_stats(self.item, *identifiers)
        except Exception as e:
            logger.error("Rate limiter error, allowing request", error=e, user_id=user_id)
            return None

        return RateLimitStatus(
            allowed=allowed,
            limit=self.requests,
            remaining=max(0, stats.remaining) if allowed else 0,
            reset=reset,
        )

    def get_status(self) -> dict:
        return {
            "enabled": self.enabled,
            "limit": self.requests,
            "window_seconds": self.window_seconds,
        }
