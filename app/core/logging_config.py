"""
Logging for the Employee Directory API.

Production writes one JSON object per line; development writes colored,
human-readable lines. HTTP requests are logged by ``RequestLoggingMiddleware``.
"""

import json
import logging
import sys
import time
import traceback
import uuid
from datetime import datetime, timezone
from typing import Optional

from app.core.config import settings

SERVICE_NAME = "employee-directory"

# Everything a bare LogRecord carries; anything else came in through `extra=`
_STANDARD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Structured log lines for aggregators."""

    def __init__(self, service_name: str = SERVICE_NAME):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": settings.ENVIRONMENT,
        }

        extra = {k: v for k, v in vars(record).items() if k not in _STANDARD_ATTRS}
        if extra:
            entry["extra"] = extra

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Console output for development, one color per level."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        when = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{when} {record.levelname:<8} {record.name}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + traceback.format_exception_only(*record.exc_info[:2])[-1].rstrip()
        return f"{color}{line}{self.RESET}"


def setup_logging(
    service_name: str = SERVICE_NAME,
    log_level: Optional[str] = None,
    json_logs: Optional[bool] = None,
) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        service_name: Value of the ``service`` field in JSON lines
        log_level: Overrides LOG_LEVEL; defaults to DEBUG when DEBUG is on, else INFO
        json_logs: Overrides the format; defaults to JSON in production
    """
    level = (log_level or settings.LOG_LEVEL or ("DEBUG" if settings.DEBUG else "INFO")).upper()
    if json_logs is None:
        json_logs = settings.IS_PRODUCTION

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter(service_name) if json_logs else ColoredFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for noisy in ("uvicorn", "uvicorn.access", "sqlalchemy.engine", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger("employee_directory.logging").info(
        f"Logging configured: level={level}, json={json_logs}"
    )


def generate_request_id() -> str:
    """Short random id attached to each request's log line."""
    return uuid.uuid4().hex[:8]


class RequestLoggingMiddleware:
    """
    ASGI middleware logging ``METHOD path status duration`` per request.

    Responses with status 400 or above are logged at WARNING. Probes and
    scrapes on SKIP_PATHS are not logged.
    """

    SKIP_PATHS = ("/health", "/metrics")

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger("employee_directory.http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = generate_request_id()
        scope.setdefault("state", {})["request_id"] = request_id
        status_code = 500
        started = time.perf_counter()

        async def send_with_status(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_with_status)
        finally:
            path = scope.get("path", "/")
            if path not in self.SKIP_PATHS:
                method = scope.get("method", "")
                duration_ms = round((time.perf_counter() - started) * 1000, 1)
                self.logger.log(
                    logging.WARNING if status_code >= 400 else logging.INFO,
                    f"{method} {path} {status_code} {duration_ms}ms",
                    extra={
                        "request_id": request_id,
                        "method": method,
                        "path": path,
                        "status": status_code,
                        "duration_ms": duration_ms,
                    },
                )
