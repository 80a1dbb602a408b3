"""
Tests for logging configuration and secret redaction.
"""

import json
import logging
import sys

from app.logging_config import (
    REDACTED,
    JsonFormatter,
    SecretRedactingFilter,
    redact,
    redact_query_string,
)


def make_record(msg: str = "Received callback with query", **extra) -> logging.LogRecord:
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRedaction:
    """Tests for secret redaction."""

    def test_redact_masks_sensitive_keys(self):
        """Test codes and tokens are masked, other keys kept."""
        redacted = redact(
            {"code": "ABC", "state": "S1", "access_token": "T", "error": "x"}
        )

        assert redacted == {
            "code": REDACTED,
            "state": "S1",
            "access_token": REDACTED,
            "error": "x",
        }

    def test_redact_leaves_empty_values(self):
        """Test empty sensitive values are left as-is."""
        assert redact({"code": ""}) == {"code": ""}

    def test_redact_does_not_mutate_input(self):
        """Test the original mapping is untouched."""
        params = {"code": "ABC"}
        redact(params)

        assert params == {"code": "ABC"}

    def test_filter_masks_extra_fields(self):
        """Test the filter masks dict-valued extra fields."""
        record = make_record(query={"code": "ABC", "state": "S1"})

        assert SecretRedactingFilter().filter(record) is True
        assert record.query == {"code": REDACTED, "state": "S1"}


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_formats_record_as_json(self):
        """Test records become one JSON object with extra fields."""
        record = make_record(query={"state": "S1"})

        data = json.loads(JsonFormatter().format(record))

        assert data["severity"] == "INFO"
        assert data["name"] == "app.test"
        assert data["message"] == "Received callback with query"
        assert data["query"] == {"state": "S1"}
        assert "timestamp" in data

    def test_includes_exception(self):
        """Test exception tracebacks are included."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "app.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )

        data = json.loads(JsonFormatter().format(record))

        assert "RuntimeError: boom" in data["exception"]


class TestAccessLogRedaction:
    """Tests for masking request paths in uvicorn access lines."""

    def test_redact_query_string(self):
        """Test only sensitive query parameters are masked."""
        assert (
            redact_query_string("/auth/callback?code=ABC&state=S1")
            == "/auth/callback?code=***&state=S1"
        )
        assert redact_query_string("/health") == "/health"

    def test_filter_masks_access_log_args(self):
        """Test the request line logged by uvicorn hides the code."""
        record = logging.LogRecord(
            "uvicorn.access",
            logging.INFO,
            __file__,
            1,
            '%s - "%s %s HTTP/%s" %d',
            ("127.0.0.1:5000", "GET", "/auth/callback?code=ABC&state=S1", "1.1", 200),
            None,
        )

        SecretRedactingFilter().filter(record)

        message = record.getMessage()
        assert "ABC" not in message
        assert "/auth/callback?code=***&state=S1" in message

    def test_access_logger_is_filtered(self):
        """Test app logging setup attached the filter to uvicorn's access logger."""
        import app.main  # noqa: F401

        access_logger = logging.getLogger("uvicorn.access")
        filters = [f for f in access_logger.filters if isinstance(f, SecretRedactingFilter)]
        assert len(filters) == 1
