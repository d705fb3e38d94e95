"""Structured JSON audit logging for the GitLab tool gateway.

Logs go to stdout as JSON lines, with optional file output via the
AUDIT_LOG_FILE env var. Entries describe which credential source served a
call (shared or user) and against which endpoint; token values are never
part of a log entry.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

from gitlab_mcp.config.settings import get_settings

AUDIT_LOGGER_NAME = "gitlab_mcp.audit"

# Request-scoped context for correlating log entries
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_var.get(""),
        }
        # Merge any extra fields passed via `extra={}` kwarg
        if hasattr(record, "audit_data"):
            log_entry.update(record.audit_data)
        return json.dumps(log_entry, default=str)


def setup_logging() -> None:
    """Configure the audit logger with JSON output."""
    settings = get_settings()

    logger = logging.getLogger(AUDIT_LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()

    formatter = JSONFormatter()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if settings.audit_log_file:
        file_handler = logging.FileHandler(settings.audit_log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Prevent propagation to root logger (avoids duplicate output)
    logger.propagate = False


def get_audit_logger() -> logging.Logger:
    return logging.getLogger(AUDIT_LOGGER_NAME)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


class RequestTimer:
    """Context manager to measure request latency."""

    def __init__(self):
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = round((time.perf_counter() - self.start_time) * 1000, 2)


def log_exchange(
    endpoint: str,
    operation: str,
    credential_source: str,
    elapsed_ms: float,
    error: Exception | None = None,
) -> None:
    """Record one GraphQL exchange.

    ``credential_source`` is "shared" or "user"; the token itself is never
    passed in.
    """
    audit_data = {
        "endpoint": endpoint,
        "operation": operation,
        "credential_source": credential_source,
        "latency_ms": elapsed_ms,
        "outcome": "error" if error else "ok",
    }
    logger = get_audit_logger()
    if error is None:
        logger.info("GraphQL exchange completed", extra={"audit_data": audit_data})
        return

    audit_data["error_type"] = type(error).__name__
    audit_data["error"] = str(error)
    logger.warning("GraphQL exchange failed", extra={"audit_data": audit_data})


def log_tool_call(tool: str, operation: str, elapsed_ms: float, error: Exception | None = None) -> None:
    """Record one tool invocation at the HTTP surface."""
    audit_data = {
        "tool": tool,
        "operation": operation,
        "latency_ms": elapsed_ms,
        "outcome": "error" if error else "ok",
    }
    logger = get_audit_logger()
    if error is None:
        logger.info("Tool invoked", extra={"audit_data": audit_data})
    else:
        audit_data["error_code"] = getattr(error, "code", type(error).__name__)
        logger.warning("Tool failed", extra={"audit_data": audit_data})
