"""
Tests for structured logging and the request logging middleware.
"""
import json
import logging

from fastapi.testclient import TestClient

from campusfeed.context import AppContext
from campusfeed.logging_config import JsonFormatter, TextFormatter, get_logger
from campusfeed.main import create_app


def _record(message="hello", **context):
    record = logging.LogRecord("campusfeed.feed", logging.INFO, __file__, 1, message, None, None)
    record.context = context
    return record


class TestFormatters:
    """Test log line rendering."""

    def test_json_line_carries_context(self):
        entry = json.loads(JsonFormatter().format(_record(post_id=7, school_id=2)))
        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "campusfeed.feed"
        assert entry["post_id"] == 7
        assert entry["school_id"] == 2

    def test_text_line(self):
        line = TextFormatter(color=False).format(_record(post_id=7))
        assert "INFO" in line
        assert "feed: hello" in line
        assert line.endswith("(post_id=7)")


class TestStructuredLogger:
    """Test context handling."""

    def test_loggers_are_shared_per_name(self):
        assert get_logger("feed") is get_logger("feed")
        assert get_logger("feed").name == "campusfeed.feed"

    def test_bind_merges_context(self, caplog):
        caplog.set_level(logging.INFO, logger="campusfeed")
        log = get_logger("feed").bind(request_id="abc")

        log.info("served", school_id=3)

        record = caplog.records[-1]
        assert record.getMessage() == "served"
        assert record.context == {"request_id": "abc", "school_id": 3}
        assert get_logger("feed").context == {}

    def test_error_includes_exception(self, caplog):
        caplog.set_level(logging.INFO, logger="campusfeed")
        try:
            raise ValueError("bad row")
        except ValueError as e:
            get_logger("db").error("write failed", error=e, post_id=1)

        context = caplog.records[-1].context
        assert context["error_type"] == "ValueError"
        assert context["error_message"] == "bad row"
        assert "Traceback" in context["traceback"]
        assert context["post_id"] == 1


class TestRequestLogging:
    """Test the debug-mode request logging middleware."""

    def test_request_id_echoed(self, settings, classifier, caplog):
        caplog.set_level(logging.INFO, logger="campusfeed.api")
        debug_settings = settings.model_copy(update={"debug": True})
        app = create_app(debug_settings, AppContext(debug_settings, classifier=classifier))

        with TestClient(app) as client:
            response = client.get("/", headers={"X-Request-ID": "req-42"})

        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == "req-42"
        assert "X-Process-Time" in response.headers
        logged = [r for r in caplog.records if r.name == "campusfeed.api"]
        assert logged[-1].context["request_id"] == "req-42"
        assert logged[-1].context["status_code"] == 200
