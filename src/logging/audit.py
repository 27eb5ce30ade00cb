"""Structured JSON audit logging for the token proxy.

Every line is a JSON object on stdout (optionally mirrored to
AUDIT_LOG_FILE). Trust material never leaves the process through here:
any ``audit_data`` key naming a credential, token or raw body is masked
by the formatter, however deeply it is nested.
"""

import json
import logging
import sys
import time
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

from src.config.settings import get_settings

LOGGER_NAME = "tokenproxy.audit"

REDACTED = "[REDACTED]"

# Compared case-insensitively with "-" folded to "_"
SENSITIVE_KEYS = frozenset({
    "client_secret",
    "authorization",
    "access_token",
    "refresh_token",
    "id_token",
    "code",
    "code_verifier",
    "password",
    "body",
    "form",
})

# Correlates every line logged while handling one request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def _is_sensitive(key) -> bool:
    return str(key).lower().replace("-", "_") in SENSITIVE_KEYS


def redact(value):
    """Return a copy of ``value`` with sensitive keys masked."""
    if isinstance(value, dict):
        return {
            k: REDACTED if _is_sensitive(k) else redact(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(v) for v in value]
    return value


class JSONFormatter(logging.Formatter):
    """One JSON object per record; ``audit_data`` fields are merged in, redacted."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_var.get(""),
        }
        audit_data = getattr(record, "audit_data", None)
        if isinstance(audit_data, dict):
            # Fixed fields win over audit_data with the same name
            entry = {**redact(audit_data), **entry}
        if record.exc_info:
            entry["exc_type"] = record.exc_info[0].__name__
        return json.dumps(entry, default=str)


def setup_logging() -> None:
    """Attach JSON handlers to the audit logger per current settings."""
    settings = get_settings()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()

    formatter = JSONFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.audit_log_file:
        handlers.append(logging.FileHandler(settings.audit_log_file))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False


def get_audit_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


class RequestTimer:
    """Wall-clock time of an upstream call, in milliseconds."""

    def __init__(self):
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = round((time.perf_counter() - self.start_time) * 1000, 2)
