from __future__ import annotations

import io
import logging

from wardkeep.log import LOGGER_NAME, configure_logging


def test_tick_column_is_rendered() -> None:
    stream = io.StringIO()
    configure_logging(logging.DEBUG, stream=stream)
    child = logging.getLogger(f"{LOGGER_NAME}.runtime.repair")

    child.debug("W1: repair scan picked road:1", extra={"tick": 1280})
    child.info("no tick here")

    lines = stream.getvalue().splitlines()
    assert "|    1280 | W1: repair scan picked road:1" in lines[0]
    assert "|       - | no tick here" in lines[1]


def test_configure_logging_does_not_stack_handlers() -> None:
    configure_logging(logging.INFO, stream=io.StringIO())
    configure_logging(logging.INFO, stream=io.StringIO())

    assert len(logging.getLogger(LOGGER_NAME).handlers) == 1
