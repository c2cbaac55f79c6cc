"""Structured logging for linearctl.

Records go to stderr so they never interleave with command output on stdout.
Keyword fields passed to the logger methods travel as ``extra`` and show up as
top-level keys when JSON output is enabled.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, TextIO

DEFAULT_LEVEL = "WARNING"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(message)s"

# attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        fields = {
            k: v
            for k, v in vars(record).items()
            if k not in _RECORD_ATTRS and not k.startswith("_")
        }
        return json.dumps(
            {
                "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
                **fields,
            },
            default=str,
        )


def _resolve_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.WARNING


class StructuredLogger:
    """Thin wrapper over a stdlib logger that accepts structured fields."""

    def __init__(
        self,
        name: str = "linearctl",
        json_logging: bool = False,
        level: str = DEFAULT_LEVEL,
        stream: TextIO | None = None,
    ) -> None:
        logger = logging.getLogger(name)
        logger.setLevel(_resolve_level(level))
        logger.handlers.clear()
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(JSONFormatter() if json_logging else logging.Formatter(TEXT_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
        self._logger = logger

    def _emit(self, level: int, message: str, fields: dict[str, Any]) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, message, extra=fields)

    def debug(self, message: str, **fields: Any) -> None:
        self._emit(logging.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self._emit(logging.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._emit(logging.WARNING, message, fields)

    def log_operation(self, operation: str, **fields: Any) -> None:
        self._emit(logging.INFO, f"Operation: {operation}", {"operation": operation, **fields})

    def log_item_action(
        self,
        action: str,
        item_id: str,
        success: bool,
        error: str | None = None,
        **fields: Any,
    ) -> None:
        """Record one bulk item; failures are INFO, successes only at DEBUG."""
        fields.update(operation=f"item_{action}", item_id=item_id, success=success)
        if success:
            self._emit(logging.DEBUG, f"{action} {item_id} ok", fields)
        else:
            fields["error"] = error
            self._emit(logging.INFO, f"{action} {item_id} failed: {error}", fields)

    def log_performance(self, operation: str, duration_ms: float, **fields: Any) -> None:
        self._emit(
            logging.INFO,
            f"Performance: {operation} completed in {duration_ms:.2f}ms",
            {"operation": operation, "duration_ms": round(duration_ms, 2), **fields},
        )

    @contextmanager
    def timed_operation(self, operation: str, **fields: Any) -> Iterator[None]:
        """Log ``operation`` on entry and its duration (and outcome) on exit."""
        self.log_operation(f"{operation}_start", **fields)
        started = time.perf_counter()
        success = False
        try:
            yield
            success = True
        finally:
            self.log_performance(
                operation, (time.perf_counter() - started) * 1000, success=success, **fields
            )


_current: StructuredLogger | None = None


def get_logger() -> StructuredLogger:
    global _current  # noqa: PLW0603
    if _current is None:
        _current = StructuredLogger()
    return _current


def configure_logging(json_logging: bool = False, level: str = DEFAULT_LEVEL) -> StructuredLogger:
    """Replace the process-wide logger (called once per CLI invocation)."""
    global _current  # noqa: PLW0603
    _current = StructuredLogger(json_logging=json_logging, level=level)
    return _current


__all__ = ["DEFAULT_LEVEL", "JSONFormatter", "StructuredLogger", "configure_logging", "get_logger"]
