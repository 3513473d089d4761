"""
Leveled diagnostic sinks.

A sink receives text that models write while being evaluated. Each level
method accepts either a string or an ``io.StringIO`` buffer, whose current
contents are used.
"""

from __future__ import annotations

import io
import logging
import sys
from typing import List, Optional, TextIO, Tuple, Union

from modeleval.utils.logging import ModelEvalLogger

Message = Union[str, io.StringIO]


def message_text(message: Message) -> str:
    """Return the text of a message given as a string or a StringIO buffer."""
    if isinstance(message, io.StringIO):
        return message.getvalue()
    return str(message)


class Logger:
    """
    Base class for diagnostic sinks.

    Subclasses implement ``log``; the level methods route through it.
    """

    def log(self, level: str, text: str) -> None:
        raise NotImplementedError("Implement log method")

    def debug(self, message: Message) -> None:
        self.log("debug", message_text(message))

    def info(self, message: Message) -> None:
        self.log("info", message_text(message))

    def warn(self, message: Message) -> None:
        self.log("warn", message_text(message))

    def error(self, message: Message) -> None:
        self.log("error", message_text(message))

    def fatal(self, message: Message) -> None:
        self.log("fatal", message_text(message))


class LoggingLogger(Logger):
    """Forward diagnostics to a standard library logger."""

    _levels = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warn": logging.WARNING,
        "error": logging.ERROR,
        "fatal": logging.CRITICAL,
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger if logger is not None else ModelEvalLogger.get_logger("modeleval.model")

    def log(self, level: str, text: str) -> None:
        self.logger.log(self._levels[level], text)


class BufferLogger(Logger):
    """Keep every message in memory as ``(level, text)`` pairs."""

    def __init__(self):
        self.messages: List[Tuple[str, str]] = []

    def log(self, level: str, text: str) -> None:
        self.messages.append((level, text))

    def texts(self, level: Optional[str] = None) -> List[str]:
        return [text for lvl, text in self.messages if level is None or lvl == level]

    def clear(self) -> None:
        self.messages.clear()


class StreamLogger(Logger):
    """Write ``LEVEL: text`` lines to a text stream (stderr by default)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stderr

    def log(self, level: str, text: str) -> None:
        self.stream.write(f"{level.upper()}: {text.rstrip()}\n")
