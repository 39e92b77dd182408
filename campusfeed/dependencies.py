"""
Request dependencies: acting user resolution, rate limiting and the
content shape check applied to every POST.

The acting user is named by a `userId` query parameter or, on JSON writes,
a `userId` body field.
"""
import json
from typing import Any, Optional

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from .database import get_db
from .models.user import User
from .responses import NotFoundError, RateLimitExceeded, require_int, validate_content


async def _json_body(request: Request) -> Optional[Any]:
    if request.method not in ("POST", "PUT", "PATCH"):
        return None
    if "json" not in request.headers.get("content-type", ""):
        return None
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


async def get_user_id_param(request: Request) -> Optional[Any]:
    """Raw userId from the query string, falling back to the JSON body."""
    user_id = request.query_params.get("userId")
    if user_id is not None:
        return user_id

    body = await _json_body(request)
    if isinstance(body, dict):
        return body.get("userId")
    return None


def get_acting_user(
    user_id: Optional[Any] = Depends(get_user_id_param),
    db: Session = Depends(get_db),
) -> User:
    """The user a request acts as; 400 when unnamed, 404 when unknown."""
    user_id = require_int(user_id, "userId")
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def enforce_rate_limit(
    request: Request,
    response: Response,
    user_id: Optional[Any] = Depends(get_user_id_param),
):
    """Count the request against its user's window; anonymous requests pass."""
    if user_id is None or user_id == "":
        return

    status = request.app.state.context.rate_limiter.hit(str(user_id))
    if status is None:
        return

    if not status.allowed:
        raise RateLimitExceeded(
            "Rate limit exceeded. Please try again later.",
            headers=status.headers,
        )
    for name, value in status.headers.items():
        response.headers[name] = value


async def check_body_content(request: Request):
    """Reject a malformed `content` field on any POST before the acting user is looked up."""
    if request.method != "POST":
        return

    body = await _json_body(request)
    if isinstance(body, dict) and body.get("content") is not None:
        validate_content(body["content"], request.app.state.context.settings.content_max_length)
