"""
Logging setup and structured pipeline events.

Console output goes through rich; the optional file sink writes one JSON
object per record with every ``extra=`` field copied in, so events such as
``duplicate_dropped`` can be filtered by key. AI responses go to a separate
``news_curator.llm`` logger with URL redaction.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
import re
from typing import Any, MutableMapping

from rich.logging import RichHandler

from ..config import LoggingConfig

LOGGER_NAME = "news_curator"

_URL_RE = re.compile(r"https?://\S+")

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

# Fields shown after the message on the console, in this order.
_CONSOLE_FIELDS = ("region", "stage", "reason", "url")

EventLogger = logging.Logger | logging.LoggerAdapter


class RegionLogAdapter(logging.LoggerAdapter):
    """Adds the region of the current cycle to every record.

    Per-call ``extra`` fields are merged over the bound ones instead of
    replacing them.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def bind_region(logger: logging.Logger | None, region: str) -> RegionLogAdapter | None:
    if logger is None:
        return None
    return RegionLogAdapter(logger, {"region": region})


def setup_logging(cfg: LoggingConfig, log_dir: Path | None = None) -> logging.Logger:
    """Configure the package logger from ``cfg``.

    The file sink is only attached when ``cfg.file`` is set and a
    ``log_dir`` is given.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level = _level_from_string(cfg.level)
    logger.setLevel(level)
    logger.handlers = []
    logger.propagate = False

    if cfg.console:
        console_handler = RichHandler(rich_tracebacks=True, show_time=False, show_path=False, markup=False)
        console_handler.setLevel(level)
        console_handler.setFormatter(EventConsoleFormatter())
        logger.addHandler(console_handler)

    if cfg.file and log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / cfg.filename, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(JsonlFormatter() if cfg.format == "jsonl" else PlainEventFormatter())
        logger.addHandler(file_handler)

    return logger


def setup_llm_logger(cfg: LoggingConfig, log_dir: Path | None) -> logging.Logger | None:
    """Return the AI response logger, or None when it is disabled."""
    if not cfg.llm_log_enabled or log_dir is None:
        return None

    logger = logging.getLogger(f"{LOGGER_NAME}.llm")
    logger.setLevel(logging.DEBUG)
    logger.handlers = []
    logger.propagate = False

    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_dir / cfg.llm_log_file, encoding="utf-8")
    file_handler.setFormatter(JsonlFormatter())
    logger.addHandler(file_handler)
    return logger


def log_event(logger: EventLogger | None, message: str, level: int = logging.INFO, **fields: Any) -> None:
    """Log ``message`` with ``fields`` attached to the record.

    Field names must not collide with LogRecord attributes (``name``,
    ``filename``, ``module``...).
    """
    if logger is None:
        return
    logger.log(level, message, extra=fields)


def redact_text(text: str, mode: str) -> str:
    if mode == "redact_content":
        return ""
    if mode == "redact_urls":
        return _URL_RE.sub("[REDACTED_URL]", text)
    return text


def truncate_text(text: str, max_chars: int = 20000) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "...(truncated)"


def event_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Return the ``extra=`` fields of ``record``."""
    return {key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS}


class JsonlFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(event_fields(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


class EventConsoleFormatter(logging.Formatter):
    """Message followed by the event name and a few identifying fields."""

    def format(self, record: logging.LogRecord) -> str:
        fields = event_fields(record)
        message = record.getMessage()
        event = fields.get("event")
        if not event:
            return message
        details = " ".join(f"{key}={fields[key]}" for key in _CONSOLE_FIELDS if fields.get(key) is not None)
        return f"{message} [{event}{' ' + details if details else ''}]"


class PlainEventFormatter(EventConsoleFormatter):
    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        return f"{stamp} {record.levelname} {super().format(record)}"


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
