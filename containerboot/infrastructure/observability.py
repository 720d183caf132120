"""Structured Logging: JSON formatter and setup for the container log stream.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Error fields come from core/errors.LOG_FIELDS, so whatever
      ContainerBootError.to_log_extra() emits reaches the JSON line
    - Startup fields (max_attempts, command, returncode) surfaced when present
    - Logs go to stderr; stdout belongs to the maintenance commands and `render`

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging is idempotent: the CLI may call it more than once in tests
"""

import logging
import json
import sys
from datetime import datetime, timezone

from containerboot.core.errors import LOG_FIELDS

_STARTUP_FIELDS = ("max_attempts", "command", "returncode")
_EXTRA_FIELDS = LOG_FIELDS + _STARTUP_FIELDS


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update(
            (key, getattr(record, key)) for key in _EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure root logging for the orchestrator process."""
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name("containerboot")
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == "containerboot":
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
