"""
Custom middleware for request processing.
"""
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .logging_config import api_logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request, tagged with a request id."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        log = api_logger.bind(request_id=request_id, method=request.method, path=request.url.path)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            log.error(
                f"{request.method} {request.url.path} -> ERROR",
                error=e,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        level = "info" if response.status_code < 400 else "warning" if response.status_code < 500 else "error"
        getattr(log, level)(
            f"{request.method} {request.url.path} -> {response.status_code}",
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(duration_ms / 1000)
        return response
