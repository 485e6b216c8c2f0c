"""
Sitechat Logging Setup
======================

Library modules only call logging.getLogger(__name__). The service that
embeds this package decides where those records go, once, at startup:

- JSON lines (log aggregation) or plain text (development)
- optional rotating log file
- either the root logger or just the "sitechat" logger tree, so a host
  with its own logging setup can route this package separately

Analysis and selection pass correlation fields through `extra=`
(material_id, content_type, score, query_intent, duration). Both
formatters render them.

Usage:
    from sitechat.logging_config import setup_logging

    setup_logging(json_output=True, log_file="logs/context.log")
    setup_logging(level="DEBUG", logger_name="sitechat")
    # or, from LOG_LEVEL / LOG_JSON / LOG_FILE:
    setup_logging_from_settings()
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from .data.config import Settings, get_settings

EXTRA_FIELDS = ("material_id", "content_type", "score", "query_intent", "duration")

TEXT_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)-36s | %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _record_extras(record: logging.LogRecord, fields: Sequence[str]) -> dict:
    extras = {}
    for key in fields:
        value = getattr(record, key, None)
        if value is not None:
            extras[key] = value
    return extras


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    Output format:
        {"ts": "2026-...", "level": "INFO", "logger": "sitechat.relevance.selector",
         "msg": "Selected 3 of 12 materials ...", "query_intent": "best_choice", ...}
    """

    def __init__(self, fields: Sequence[str] = EXTRA_FIELDS):
        super().__init__()
        self.fields = tuple(fields)

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(_record_extras(record, self.fields))

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines with the correlation fields appended as key=value."""

    def __init__(self, fields: Sequence[str] = EXTRA_FIELDS):
        super().__init__(TEXT_FORMAT, datefmt=TEXT_DATEFMT)
        self.fields = tuple(fields)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _record_extras(record, self.fields)
        if not extras:
            return line

        # keep a trailing traceback on its own lines
        head, sep, tail = line.partition("\n")
        suffix = " ".join(f"{key}={value}" for key, value in extras.items())
        return f"{head} [{suffix}]{sep}{tail}"


def _build_handlers(
    formatter: logging.Formatter,
    log_file: Optional[str],
    max_bytes: int,
    backup_count: int,
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    logger_name: Optional[str] = None,
) -> logging.Logger:
    """
    Attach handlers for context-selection logs.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: JSON lines instead of plain text
        log_file: Optional file path, rotated at max_bytes
        max_bytes: Max file size before rotation
        backup_count: Number of rotated files to keep
        logger_name: None for the root logger, or e.g. "sitechat" to
            configure only this package (records then stop propagating)

    Returns:
        The configured logger.
    """
    target = logging.getLogger(logger_name)
    target.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(target.handlers):
        target.removeHandler(handler)
        handler.close()

    formatter = JSONFormatter() if json_output else TextFormatter()
    for handler in _build_handlers(formatter, log_file, max_bytes, backup_count):
        target.addHandler(handler)

    if logger_name:
        target.propagate = False

    logging.getLogger(__name__).info(
        "Logging configured: target=%s level=%s json=%s file=%s",
        logger_name or "root", level, json_output, log_file or "none",
    )
    return target


def setup_logging_from_settings(
    settings: Optional[Settings] = None,
    logger_name: Optional[str] = None,
) -> logging.Logger:
    """setup_logging() driven by LOG_LEVEL / LOG_JSON / LOG_FILE."""
    cfg = (settings or get_settings()).logging
    return setup_logging(
        level=cfg.level,
        json_output=cfg.json_logs,
        log_file=cfg.log_file,
        logger_name=logger_name,
    )
