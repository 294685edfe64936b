# staff_portal/core/logger.py
"""
Log function handed to modules and the auth bridge.
Modules never see the logging module directly; they get a plain
``(level, message)`` callable so the host can decide where lines end up.
"""
import logging
from typing import Callable, Literal

LogLevel = Literal["info", "warn", "error", "debug"]
LogFunction = Callable[[LogLevel, str], None]

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_logger = logging.getLogger("uvicorn.error")


def default_logger(level: LogLevel, message: str) -> None:
    """
    Forward a log line to the ``uvicorn.error`` logger.
    Unknown levels are logged as warnings so nothing is dropped silently.
    """
    _logger.log(_LEVELS.get(level, logging.WARNING), message)
