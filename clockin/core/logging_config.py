# clockin/core/logging_config.py
"""
Logging configuration for the Clockin earnings service.

Development: coloured console plus a plain rotating file.
Production: JSON lines (one object per record) to stdout and to rotating
app/error files, carrying the request ID and any `extra_fields`.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path

from clockin.core.config import APP_VERSION, IS_PRODUCTION, LOG_DIR, LOG_LEVEL

APP_LOG_NAME = "clockin.log"
ERROR_LOG_NAME = "clockin-error.log"

#: Record attributes set by LogContext that are copied into JSON output.
_CONTEXT_FIELDS = ("settings_file", "timezone")

#: Third-party loggers and the lowest level they may emit.
_QUIET_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "uvicorn.error": logging.INFO,
    "watchfiles": logging.WARNING,
    "httpx": logging.WARNING,
}

_CONSOLE_FORMAT = "%(levelname)-8s %(asctime)s [%(name)s] %(message)s"
_FILE_FORMAT = "%(levelname)s %(asctime)s [%(name)s:%(lineno)d] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}:{record.funcName}:{record.lineno}",
            "service": "clockin",
            "version": APP_VERSION,
        }

        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value

        payload.update(getattr(record, "extra_fields", None) or {})

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Level names in colour for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)
        # File handlers get the same record; colour a copy
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _rotating_handler(path: Path, level: int, max_bytes: int, backups: int, formatter: logging.Formatter):
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> None:
    """
    Configure the root logger. Safe to call more than once.

    Level comes from CLOCKIN_LOG_LEVEL and files go to CLOCKIN_LOG_DIR.
    """
    log_dir = Path(LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    level = logging.getLevelName(LOG_LEVEL)
    if not isinstance(level, int):
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if IS_PRODUCTION:
        formatter = JSONFormatter()
        handlers = [
            _console_handler(logging.WARNING, formatter),
            _rotating_handler(log_dir / APP_LOG_NAME, level, 10_000_000, 5, formatter),
            _rotating_handler(log_dir / ERROR_LOG_NAME, logging.ERROR, 10_000_000, 10, formatter),
        ]
    else:
        handlers = [
            _console_handler(level, ColoredFormatter(fmt=_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)),
            _rotating_handler(log_dir / APP_LOG_NAME, level, 5_000_000, 2, logging.Formatter(_FILE_FORMAT)),
        ]

    for handler in handlers:
        root_logger.addHandler(handler)

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={
            "extra_fields": {
                "log_dir": str(log_dir.absolute()),
                "level": logging.getLevelName(level),
                "production": IS_PRODUCTION,
            }
        },
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Attach fields to every record created inside the block.

    Swaps the process-wide record factory, so use it around startup work,
    not around concurrent requests.

    Usage:
        with LogContext(settings_file="data/settings.json"):
            logger.info("Default settings loaded")
    """

    def __init__(self, **fields):
        self.fields = fields
        self._previous = None

    def __enter__(self):
        self._previous = logging.getLogRecordFactory()
        previous = self._previous
        fields = self.fields

        def record_factory(*args, **kwargs):
            record = previous(*args, **kwargs)
            record.__dict__.update(fields)
            return record

        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        logging.setLogRecordFactory(self._previous)
        return False
