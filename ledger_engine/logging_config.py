"""
Logging setup.

Production logs are emitted as one JSON object per line so they
can be shipped to a log aggregator. Development logs use a plain
human-readable format. Every module gets its logger through
logging.getLogger(__name__); this module only wires handlers.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from ledger_engine.config import get_settings

SERVICE_NAME = "ledger-engine"

# Attributes every LogRecord has. Anything else was passed via extra=.
_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs", "message",
    "pathname", "process", "processName", "relativeCreated", "thread",
    "threadName", "exc_info", "exc_text", "stack_info", "taskName",
})

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON documents."""

    def __init__(self, service_name: str = SERVICE_NAME, environment: str = "development"):
        super().__init__()
        self.service_name = service_name
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": self.environment,
            "location": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        extra = {
            key: value for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


def configure_logging(level: str | None = None, json_format: bool | None = None) -> None:
    """
    Configure the root logger.

    Arguments default to LOG_LEVEL / LOG_JSON from settings.
    Calling this more than once replaces the previous handler.
    """
    settings = get_settings()
    level = level or settings.LOG_LEVEL
    if json_format is None:
        json_format = settings.LOG_JSON

    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(JSONFormatter(environment=settings.ENVIRONMENT))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
