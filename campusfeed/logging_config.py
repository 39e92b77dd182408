"""
Campus Feed Logging Configuration

Every service logger lives under the "campusfeed" namespace and shares one
stdout handler, attached the first time any of them is requested. Call
sites pass context as keyword arguments:

    moderation_logger.warning("Classifier timed out", post_id=12, model="openai/gpt-4o")

and `bind()` fixes context for a stretch of work, e.g. one HTTP request.

Environment:
    CAMPUSFEED_LOG_LEVEL   DEBUG / INFO (default) / WARNING / ERROR
    CAMPUSFEED_LOG_FORMAT  json (default) or text
"""
import json
import logging
import os
import sys
import time
import traceback
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Dict, Optional

ROOT_LOGGER = "campusfeed"

LOG_LEVEL = os.environ.get("CAMPUSFEED_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.environ.get("CAMPUSFEED_LOG_FORMAT", "json")


class JsonFormatter(logging.Formatter):
    """One JSON object per line; context keys sit beside the message"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "context", {}))
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Short human-readable lines for local development"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, color: Optional[bool] = None):
        super().__init__()
        self.color = sys.stdout.isatty() if color is None else color

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, timezone.utc).strftime("%H:%M:%S")
        short_name = record.name.split(".", 1)[-1]
        line = f"[{stamp}] {record.levelname:<7} {short_name}: {record.getMessage()}"

        context = getattr(record, "context", {})
        fields = " ".join(f"{k}={v}" for k, v in context.items() if k != "traceback")
        if fields:
            line = f"{line} ({fields})"
        if "traceback" in context:
            line = f"{line}\n{context['traceback']}"

        if self.color:
            return f"{self.COLORS.get(record.levelname, '')}{line}{self.RESET}"
        return line


def configure_logging(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> logging.Logger:
    """(Re)attach the shared handler to the campusfeed namespace"""
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if fmt == "json" else TextFormatter())
    root.addHandler(handler)
    return root


def _error_context(error: Exception) -> Dict[str, Any]:
    return {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "traceback": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
    }


class StructuredLogger:
    """Thin wrapper over a stdlib logger that carries keyword context"""

    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        self.name = name
        self.logger = logging.getLogger(name)
        self.context = dict(context or {})

    def bind(self, **context) -> "StructuredLogger":
        """A logger on the same channel with extra fixed context"""
        return StructuredLogger(self.name, {**self.context, **context})

    def _log(self, level: int, message: str, context: Dict[str, Any]):
        if self.logger.isEnabledFor(level):
            self.logger.log(level, message, extra={"context": {**self.context, **context}})

    def debug(self, message: str, **context):
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, **context):
        self._log(logging.INFO, message, context)

    def warning(self, message: str, **context):
        self._log(logging.WARNING, message, context)

    def error(self, message: str, error: Optional[Exception] = None, **context):
        if error is not None:
            context.update(_error_context(error))
        self._log(logging.ERROR, message, context)


def timed(logger: StructuredLogger):
    """Log how long each call of the wrapped function takes"""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"{func.__name__} failed",
                    error=e,
                    function=func.__name__,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )
                raise
            logger.debug(
                f"{func.__name__} completed",
                function=func.__name__,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return result

        return wrapper

    return decorator


_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Logger for one component, e.g. get_logger("feed") -> campusfeed.feed"""
    if not logging.getLogger(ROOT_LOGGER).handlers:
        configure_logging()
    full_name = f"{ROOT_LOGGER}.{name}"
    if full_name not in _loggers:
        _loggers[full_name] = StructuredLogger(full_name)
    return _loggers[full_name]


api_logger = get_logger("api")
worker_logger = get_logger("worker")
moderation_logger = get_logger("moderation")
db_logger = get_logger("db")
