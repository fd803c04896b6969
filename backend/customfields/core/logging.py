"""Logging setup and helpers for the custom-field engine.

Modules obtain loggers through `get_logger(__name__)` and log dotted event
names (`custom_field.definition.created`) with structured `extra` payloads.
`configure_logging()` installs a single stderr handler using either a plain
text format (extras appended as `key=value`) or one JSON object per line.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from time import perf_counter
from typing import Any, Final

from customfields.core.config import settings

TRACE_LEVEL: Final[int] = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

TEXT_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s %(message)s"
DATE_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%S"

_STANDARD_RECORD_ATTRS: Final[frozenset[str]] = frozenset(
    {
        *logging.LogRecord("", 0, "", 0, "", (), None).__dict__,
        "message",
        "asctime",
    },
)


def _record_extra(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_RECORD_ATTRS
    }


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def __init__(self, *, use_utc: bool = True) -> None:
        super().__init__()
        self._use_utc = use_utc

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC if self._use_utc else None)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        extra = _record_extra(record)
        if extra:
            payload["extra"] = extra
        return json.dumps(payload, default=str)


class KeyValueFormatter(logging.Formatter):
    """Text formatter that appends structured extras as `key=value` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extra = _record_extra(record)
        if not extra:
            return base
        pairs = " ".join(f"{key}={value}" for key, value in sorted(extra.items()))
        return f"{base} {pairs}"


def configure_logging(
    *,
    level: str | int | None = None,
    log_format: str | None = None,
    force: bool = False,
) -> None:
    """Install the root handler once; pass `force=True` to reconfigure."""
    root = logging.getLogger()
    if root.handlers and not force:
        return

    resolved_level = level if level is not None else settings.log_level
    if isinstance(resolved_level, str):
        resolved_level = logging.getLevelName(resolved_level.strip().upper())
    if not isinstance(resolved_level, int):
        msg = f"Unknown log level: {level or settings.log_level}"
        raise ValueError(msg)

    resolved_format = log_format or settings.log_format
    formatter: logging.Formatter
    if resolved_format == "json":
        formatter = JsonFormatter(use_utc=settings.log_use_utc)
    else:
        formatter = KeyValueFormatter(TEXT_FORMAT, datefmt=DATE_FORMAT)
        if settings.log_use_utc:
            formatter.converter = time.gmtime

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(resolved_level)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger."""
    return logging.getLogger(name)


@contextmanager
def log_operation(
    logger: logging.Logger,
    event: str,
    **extra: object,
) -> Iterator[None]:
    """Time a block and log `<event>.complete`, warning when it is slow."""
    started_at = perf_counter()
    logger.log(TRACE_LEVEL, f"{event}.start", extra=extra)
    try:
        yield
    finally:
        duration_ms = int((perf_counter() - started_at) * 1000)
        payload = {**extra, "duration_ms": duration_ms}
        logger.debug(f"{event}.complete", extra=payload)
        slow_ms = settings.slow_operation_ms
        if slow_ms and duration_ms >= slow_ms:
            logger.warning(
                f"{event}.slow",
                extra={**payload, "slow_threshold_ms": slow_ms},
            )
