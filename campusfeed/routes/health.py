"""
Campus Feed Health Check Routes
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["health"])

START_TIME = datetime.now(timezone.utc)


def get_uptime() -> str:
    """Get uptime as human-readable string"""
    delta = datetime.now(timezone.utc) - START_TIME
    hours, remainder = divmod(delta.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if delta.days > 0:
        return f"{delta.days}d {hours}h {minutes}m"
    elif hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    else:
        return f"{minutes}m {seconds}s"


@router.get("")
def health_check(request: Request):
    """Store, rate limiter, moderation and background queue status."""
    ctx = request.app.state.context
    database = ctx.check_database()
    return {
        "status": "healthy" if database["status"] == "healthy" else "degraded",
        "environment": ctx.settings.environment,
        "uptime": get_uptime(),
        "database": database,
        "rate_limiter": ctx.rate_limiter.get_status(),
        "moderation": {"enabled": ctx.moderation.classifier is not None},
        "tasks": ctx.tasks.get_status(),
    }
