"""Logging setup for the completion engine.

Completion runs from shell hooks, where stdout carries the candidates: log
records go to stderr (coloured when it is a terminal) and optionally to a file.
"""

import logging
import os
import sys
from typing import TextIO

__all__ = [
    "LEVEL_COLOURS",
    "LogObjects",
    "colour_enabled",
    "get_logger",
    "init_logger",
    "is_debug",
    "set_debug",
]

# SGR parameters per level, levels not listed are left plain
LEVEL_COLOURS = {
    logging.WARNING: "33;2",
    logging.ERROR: "31;2",
    logging.CRITICAL: "31;1",
}


def colour_enabled(stream: TextIO | None = None) -> bool:
    """Tell whether records written to `stream` (stderr by default) get colours.

    NO_COLOR disables colours, FORCE_COLOR enables them, otherwise only
    terminals are coloured.
    """
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    target = sys.stderr if stream is None else stream
    return hasattr(target, "isatty") and target.isatty()


class LogObjects:
    """State shared by every logger created through get_logger."""

    handlers: list[logging.Handler] = []
    debug: bool = bool(os.environ.get("ATTRCOMPLETE_DEBUG"))


def is_debug() -> bool:
    """Tell whether debug mode is on (ATTRCOMPLETE_DEBUG or force_debug)."""
    return LogObjects.debug


def set_debug(value: bool) -> None:
    """Turn debug mode on or off for loggers created afterwards."""
    LogObjects.debug = value


class ScreenLogFormatter(logging.Formatter):
    """Formatter colouring warnings and errors when the terminal allows it."""

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        log_format = r"%(name)20s - %(message)s // %(filename)s:%(lineno)d" if is_debug() else r"%(message)s"
        coloured = colour_enabled(stream)
        self._formatters = {level: logging.Formatter(log_format) for level in (logging.DEBUG, logging.INFO)}
        for level, sgr in LEVEL_COLOURS.items():
            self._formatters[level] = logging.Formatter(f"\x1b[{sgr}m{log_format}\x1b[0m" if coloured else log_format)

    def format(self, record: logging.LogRecord) -> str:
        return self._formatters.get(record.levelno, self._formatters[logging.INFO]).format(record)


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Initialize the logging system.

    Args:
        filename: Optional filename to log to
        force_debug: If True, force debug level
    """
    if force_debug:
        set_debug(True)

    LogObjects.handlers.clear()
    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"))
        LogObjects.handlers.append(file_handler)
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(ScreenLogFormatter(stream_handler.stream))
    LogObjects.handlers.append(stream_handler)


def get_logger(name: str = "attrcomplete", level: int | None = None) -> logging.Logger:
    """Return a named logger wired to the shared handlers.

    Args:
        name: logger's name
        level: logger's level (DEBUG in debug mode, WARNING otherwise, if not set)

    Returns:
        The logger instance
    """
    logger = logging.getLogger(name)
    if level is None:
        logger.setLevel(logging.DEBUG if is_debug() else logging.WARNING)
    else:
        logger.setLevel(level)
    logger.propagate = False
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.debug('Logger "%s" initialized', name)
    return logger
