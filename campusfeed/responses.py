"""
Campus Feed API Error Utilities
Error taxonomy and the handlers that render it
"""
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, Optional

from .logging_config import api_logger


# ============================================================
# ERROR BODY
# ============================================================

def error_body(message: str, status_code: int) -> Dict[str, Any]:
    """Shape shared by every error response"""
    return {"error": {"message": message, "statusCode": status_code}}


# ============================================================
# ERROR TAXONOMY
# ============================================================

class ApiException(HTTPException):
    """API exception rendered as {error: {message, statusCode}}"""

    status_code = 500

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=type(self).status_code, detail=message, headers=headers)

    @property
    def message(self) -> str:
        return self.detail


class ValidationError(ApiException):
    """User input malformed or missing"""
    status_code = 400


class NotFoundError(ApiException):
    """Referenced entity absent"""
    status_code = 404


class ConflictError(ApiException):
    """Unique constraint violation"""
    status_code = 409


class IntegrityError(ApiException):
    """Foreign key violation"""
    status_code = 400


class InternalError(ApiException):
    """Unexpected store failure"""
    status_code = 500


class RateLimitExceeded(ApiException):
    status_code = 429


def not_found(resource: str = "Resource"):
    raise NotFoundError(f"{resource} not found")


# ============================================================
# EXCEPTION HANDLERS
# ============================================================

async def api_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for API errors"""

    if isinstance(exc, StarletteHTTPException):
        level = "warning" if exc.status_code < 500 else "error"
        getattr(api_logger, level)(
            f"API Error: {exc.detail}",
            status_code=exc.status_code,
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail), exc.status_code),
            headers=getattr(exc, "headers", None),
        )

    api_logger.error(
        f"Unexpected error: {exc}",
        error=exc,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", 500),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render body/query validation failures as 400s"""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", message)

    api_logger.warning(
        f"Validation Error: {message}",
        status_code=400,
        path=request.url.path,
    )
    return JSONResponse(status_code=400, content=error_body(message, 400))


# ============================================================
# VALIDATION HELPERS
# ============================================================

def require(value: Any, field_name: str):
    """Require a field to be present"""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required")
    return value


def require_int(value: Any, field_name: str) -> int:
    """Require a field to be present and parse as an integer"""
    require(value, field_name)
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a valid number")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a valid number")


def validate_content(content: Any, max_length: int = 300) -> str:
    """Content must be a non-empty string of at most max_length characters"""
    if content is None:
        raise ValidationError("content is required")
    if not isinstance(content, str) or len(content) == 0:
        raise ValidationError("content must be a non-empty string")
    if len(content) > max_length:
        raise ValidationError(f"content must be {max_length} characters or less")
    return content


def parse_page_size(value: Optional[str], default: int = 30, maximum: int = 100) -> int:
    """Page size from a query string; missing, junk or non-positive means default"""
    try:
        size = int(value) if value is not None else default
    except ValueError:
        return default
    if size <= 0:
        return default
    return min(size, maximum)


def _is_decimal(value: str) -> bool:
    return value.isascii() and value.isdigit()


def parse_path_id(value: str, message: str) -> int:
    """Numeric path segment; anything but plain ASCII digits is a 400"""
    if not _is_decimal(value):
        raise ValidationError(message)
    return int(value)


def parse_cursor(value: Optional[str]) -> Optional[int]:
    """
    Cursor from a query string.

    Empty and "0" mean no cursor (first page); anything other than plain
    ASCII digits is rejected.
    """
    if value is None or value == "":
        return None
    if not _is_decimal(value):
        raise ValidationError("cursor must be a valid timestamp")
    return int(value) or None
