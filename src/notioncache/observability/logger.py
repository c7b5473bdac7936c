"""Single-line JSON logging for notioncache.

Sync runs touch signed file URLs and carry the integration token, so every
structured field goes through :func:`notioncache.utils.redact.redact` before
it is written.  A record looks like::

    {"ts": "2025-07-01T12:00:00.123456+00:00", "level": "WARNING",
     "logger": "notioncache.connector", "message": "Dropping block",
     "op": "get_child_blocks", "block_id": "5f2c...", "block_type": "unsupported"}

Usage::

    from notioncache.observability import get_logger

    log = get_logger("notioncache.cache")
    log.info("Document cached", extra={"extra_fields": {"document_id": "abc"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from notioncache.utils.redact import redact

ROOT_LOGGER = "notioncache"


class StructuredFormatter(logging.Formatter):
    """Render a record as one JSON object per line.

    Keys ``ts`` (record creation time, UTC), ``level``, ``logger`` and
    ``message`` are always present.  ``extra_fields`` are redacted and merged
    at the top level; ``exception`` and ``stack_info`` appear when set.

    Parameters
    ----------
    token:
        Integration token to scrub from field values, if known.
    """

    def __init__(self, token: str | None = None) -> None:
        super().__init__()
        self.token = token

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields = getattr(record, "extra_fields", None)
        if fields:
            entry.update(redact(fields, self.token))

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)


_configured: set[str] = set()


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def get_logger(
    name: str = ROOT_LOGGER,
    *,
    level: int | str = logging.DEBUG,
    stream: Any | None = None,
) -> logging.Logger:
    """Return the logger *name*, attaching a JSON handler on first use.

    Repeated calls never stack handlers.  Loggers do not propagate, so
    host applications that configure the root logger see no duplicates.
    """
    logger = logging.getLogger(name)
    if name in _configured:
        return logger

    logger.setLevel(_resolve_level(level))
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    _configured.add(name)
    return logger


def configure_logging(level: int | str, token: str | None = None) -> None:
    """Apply *level* and token scrubbing to every notioncache logger created so far."""
    resolved = _resolve_level(level)
    for name in _configured:
        if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
            continue
        logger = logging.getLogger(name)
        logger.setLevel(resolved)
        for handler in logger.handlers:
            if isinstance(handler.formatter, StructuredFormatter):
                handler.formatter.token = token
