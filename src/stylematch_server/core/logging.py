"""
Logging Configuration

Central setup for the `stylematch.*` logger hierarchy.

Every module obtains its logger with `logging.getLogger("stylematch.<name>")`
and never configures handlers itself. The application factory calls
`configure_logging()` once at startup.

Two output formats are supported:
- Human-readable, colorized lines for local development
- Single-line JSON records for log aggregation in production
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

ROOT_LOGGER_NAME = "stylematch"


class JsonFormatter(logging.Formatter):
    """JSON-formatted log output for production use."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class HumanFormatter(logging.Formatter):
    """Human-readable log output for development."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        level = f"{color}{record.levelname:8}{self.RESET}"
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        line = f"{timestamp} {level} {record.name}: {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: str = "INFO", json_output: bool = False) -> logging.Logger:
    """
    Attach a single stream handler to the `stylematch` logger.

    Calling this more than once replaces the previous handler rather than
    stacking duplicates.

    Parameters
    ----------
    level : str
        Log level name (e.g. "DEBUG", "INFO").

    json_output : bool
        Emit JSON lines instead of human-readable output.

    Returns
    -------
    logging.Logger
        The configured root application logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_output else HumanFormatter())
    logger.addHandler(handler)

    return logger
