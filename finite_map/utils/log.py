"""Loguru wiring for library consumers."""

from __future__ import annotations

import sys

from loguru import logger

PACKAGE = "finite_map"

_sink_id: int | None = None


def configure_logging(level: str = "INFO") -> int:
    """
    Enable the package's log records and route them to stderr.

    Calling it again replaces the previous sink. Returns the loguru sink id.
    """
    global _sink_id
    if _sink_id is not None:
        logger.remove(_sink_id)
    logger.enable(PACKAGE)
    _sink_id = logger.add(
        sys.stderr,
        level=level.upper(),
        filter=PACKAGE,
        format="{time:HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
    )
    return _sink_id


def disable_logging() -> None:
    """Silence the package again and drop the sink added by configure_logging."""
    global _sink_id
    if _sink_id is not None:
        logger.remove(_sink_id)
        _sink_id = None
    logger.disable(PACKAGE)
