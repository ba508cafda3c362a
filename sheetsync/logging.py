"""Logging configuration.

Production runs emit one JSON object per line on stdout, in the shape Google
Cloud Logging parses (severity, message, time, source location). Development
runs get coloured, human-readable lines on stderr. Standard library logging
(uvicorn, httpx) is routed through loguru in both cases.
"""

import json
import logging
import sys
import traceback
from typing import Any

from loguru import logger

# loguru level name -> Cloud Logging severity
SEVERITY = {
    "TRACE": "DEBUG",
    "DEBUG": "DEBUG",
    "INFO": "INFO",
    "SUCCESS": "INFO",
    "WARNING": "WARNING",
    "ERROR": "ERROR",
    "CRITICAL": "CRITICAL",
}

DEV_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level> <dim>{extra}</dim>"
    "{exception}"
)

INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx", "httpcore")


def to_cloud_entry(record: dict[str, Any]) -> dict[str, Any]:
    """Convert a loguru record to a Cloud Logging structured entry.

    Fields logged via ``extra={...}`` are flattened to the top level so they
    can be filtered on in the Logs Explorer.
    """
    entry: dict[str, Any] = {
        "severity": SEVERITY.get(record["level"].name, "INFO"),
        "message": record["message"],
        "time": record["time"].isoformat(),
    }

    if record["level"].no >= logging.ERROR:
        entry["logging.googleapis.com/sourceLocation"] = {
            "file": record["file"].path,
            "line": str(record["line"]),
            "function": record["function"],
        }

    exception = record["exception"]
    if exception is not None:
        entry["exception"] = {
            "type": exception.type.__name__ if exception.type else None,
            "value": str(exception.value) if exception.value else None,
            "traceback": (
                "".join(
                    traceback.format_exception(
                        exception.type, exception.value, exception.traceback
                    )
                )
                if exception.traceback
                else None
            ),
        }

    for key, value in record.get("extra", {}).items():
        if key.startswith("_"):
            continue
        if key == "extra" and isinstance(value, dict):
            entry.update({k: v for k, v in value.items() if k not in entry})
        else:
            entry.setdefault(key, value)

    return entry


def _json_sink(message: Any) -> None:
    sys.stdout.write(json.dumps(to_cloud_entry(message.record), default=str) + "\n")
    sys.stdout.flush()


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(*, is_production: bool, log_level: str = "INFO") -> None:
    """Configure loguru for the application.

    Args:
        is_production: If True, output JSON for Cloud Logging. If False, use
            human-readable colored output for development.
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    logger.remove()

    if is_production:
        logger.add(
            _json_sink,
            level=log_level,
            format="{message}",
            backtrace=False,
            diagnose=False,  # Don't include variable values in production
        )
    else:
        logger.add(
            sys.stderr,
            level=log_level,
            format=DEV_FORMAT,
            colorize=True,
            backtrace=True,
            diagnose=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=log_level, force=True)
    for name in INTERCEPTED_LOGGERS:
        logging.getLogger(name).setLevel(log_level)
        logging.getLogger(name).handlers = [InterceptHandler()]
