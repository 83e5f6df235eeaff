"""Logging setup for estate-registry.

Log records may carry registry context: the logical ``tick`` at which they
were emitted, the ``operation`` being run and the ``caller`` running it.
Pass them with ``extra={"operation": ..., "caller": ...}``; the tick is
stamped by ``ClockFilter`` when ``setup_logging`` is given a clock.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from estate_registry.clock import Clock

CONTEXT_FIELDS = ("tick", "operation", "caller")


class ClockFilter(logging.Filter):
    """Stamp each record with the current tick of a registry clock."""

    def __init__(self, clock: Clock) -> None:
        super().__init__()
        self.clock = clock

    def filter(self, record: logging.LogRecord) -> bool:
        record.tick = self.clock.now()
        return True


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}


class RegistryFormatter(logging.Formatter):
    """Plain text lines, suffixed with whatever registry context the record has."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context(record)
        if not context:
            return line
        return line + " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, registry context as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context(record),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    clock: Clock | None = None,
) -> logging.Handler:
    """Route all logging to stdout.

    Parameters
    ----------
    level : str
        Log level name. Unknown names fall back to INFO.
    format_type : str
        ``"standard"`` or ``"json"``.
    clock : Clock | None
        If given, every record is stamped with its current tick.

    Returns
    -------
    logging.Handler
        The installed handler. Any handler previously on the root logger is
        removed.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(JsonFormatter() if format_type == "json" else RegistryFormatter())
    if clock is not None:
        handler.addFilter(ClockFilter(clock))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger("estate_registry").setLevel(log_level)

    # Reduce noise from external libraries
    logging.getLogger("confluent_kafka").setLevel(logging.WARNING)
    logging.getLogger("faker").setLevel(logging.WARNING)
    return handler
