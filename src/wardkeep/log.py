"""Logging setup for the allocation engine.

Modules log through ``logging.getLogger(__name__)`` and pass the current
tick as ``extra={"tick": tick}``.  :func:`configure_logging` wires a stream
handler whose formatter renders that tick as its own column::

    2026-10-17 21:14:03.412 | DEBUG   |    1280 | W1N1: repair scan picked road:3
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "wardkeep"


class TickFormatter(logging.Formatter):
    BASE_FMT = "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(tick_col)7s | %(message)s"
    DATE_FMT = "%Y-%m-%d %H:%M:%S"

    def __init__(self) -> None:
        super().__init__(fmt=self.BASE_FMT, datefmt=self.DATE_FMT)

    def format(self, record: logging.LogRecord) -> str:
        tick = getattr(record, "tick", None)
        record.tick_col = "-" if tick is None else str(tick)
        return super().format(record)


def configure_logging(level: int = logging.INFO, *, stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach a single tick-aware stream handler to the package logger."""

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if isinstance(handler.formatter, TickFormatter):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(TickFormatter())
    logger.addHandler(handler)
    return logger


__all__ = ["LOGGER_NAME", "TickFormatter", "configure_logging"]
