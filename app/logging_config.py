"""
Logging configuration for Cloud Run and local environments.

Automatically detects Cloud Run environment and configures appropriate logging:
- Cloud Run: google-cloud-logging with trace correlation
- Local/Test: Standard Python logging to stdout with JSON formatting

In both cases OAuth secrets (codes, tokens, client secrets) found in
structured log fields or in logged request paths (uvicorn access log)
are masked before the record is emitted.
"""

import json
import logging
import os
from datetime import UTC, datetime
from typing import Any
from urllib.parse import parse_qsl, urlencode


# Query/body keys whose values must never reach the logs
SENSITIVE_KEYS = frozenset(
    {"code", "access_token", "token", "refresh_token", "id_token", "client_secret"}
)
REDACTED = "***"

# Attributes present on every LogRecord; anything else came from `extra=`
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


def redact(value: Any) -> Any:
    """Return a copy of a mapping with sensitive values masked."""
    if isinstance(value, dict):
        return {
            k: REDACTED if k in SENSITIVE_KEYS and v else redact(v)
            for k, v in value.items()
        }
    return value


def redact_query_string(path: str) -> str:
    """Mask sensitive query parameters in a request path."""
    base, sep, query = path.partition("?")
    if not sep:
        return path
    pairs = [
        (k, REDACTED if k in SENSITIVE_KEYS and v else v)
        for k, v in parse_qsl(query, keep_blank_values=True)
    ]
    return f"{base}?{urlencode(pairs, safe='*')}"


class SecretRedactingFilter(logging.Filter):
    """
    Mask sensitive values in dict-valued `extra` fields and in request
    paths passed as format args (e.g. uvicorn.access request lines).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, tuple):
            record.args = tuple(
                redact_query_string(arg) if isinstance(arg, str) and "?" in arg else arg
                for arg in record.args
            )
        for key, value in list(record.__dict__.items()):
            if key not in _RESERVED_ATTRS and isinstance(value, dict):
                setattr(record, key, redact(value))
        return True


class JsonFormatter(logging.Formatter):
    """
    Custom JSON log formatter.

    Ensures that logs in local development are structured JSON,
    similar to what Google Cloud Logging expects.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as a JSON string.

        Args:
            record: The log record to format.

        Returns:
            A JSON string representing the log record.
        """
        log_object = {
            "timestamp": datetime.now(UTC).isoformat(),
            "severity": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        # Fields passed through `extra=`
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_object[key] = value

        if record.exc_info:
            log_object["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_object, default=str)


def setup_global_logging() -> None:
    """
    Configure global logging based on environment.

    When running in Cloud Run (K_SERVICE env var is set):
    - Uses google-cloud-logging for structured logs with trace correlation.

    When running locally or in tests:
    - Uses standard Python logging with a custom JSON formatter on stdout.

    LOG_LEVEL overrides the default INFO level.
    """
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    is_cloud_run = os.getenv("K_SERVICE") is not None
    root_logger = logging.getLogger()

    if is_cloud_run:
        try:
            import google.cloud.logging

            client = google.cloud.logging.Client()
            client.setup_logging()
            logging.info("Cloud Logging initialized for Cloud Run.")
        except Exception as e:
            # Fallback for Cloud Logging import/initialization errors
            logging.basicConfig(
                level=level,
                format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            )
            logging.warning(f"Cloud Logging setup failed, using basic config: {e}")
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        root_logger.addHandler(handler)

        # Remove default handlers to avoid duplicate logs
        for h in root_logger.handlers[:-1]:
            root_logger.removeHandler(h)

    root_logger.setLevel(level)
    for h in root_logger.handlers:
        if not any(isinstance(f, SecretRedactingFilter) for f in h.filters):
            h.addFilter(SecretRedactingFilter())

    # uvicorn.access has its own handler; filter at the logger instead
    access_logger = logging.getLogger("uvicorn.access")
    if not any(isinstance(f, SecretRedactingFilter) for f in access_logger.filters):
        access_logger.addFilter(SecretRedactingFilter())
