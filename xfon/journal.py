"""Message journal with syslog-style levels."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TextIO


class Level(IntEnum):
    """Severity levels, with the numbering of syslog."""

    ERR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


_PREFIXES = {
    Level.ERR: "Error: ",
    Level.WARNING: "Warning: ",
    Level.NOTICE: "Notice: ",
    Level.INFO: "Info: ",
}


class Journal:
    """Records every message and prints those at or above the verbosity."""

    def __init__(self, max_level: int = Level.WARNING, stream: TextIO | None = None):
        self.max_level = int(max_level)
        self.stream = stream
        self.lines: list[tuple[int, str]] = []

    def log(self, level: int, message: str) -> None:
        """Record ``message``; print it when ``level`` is within the verbosity."""
        self.lines.append((int(level), message))
        if level <= self.max_level:
            out = self.stream if self.stream is not None else sys.stderr
            out.write(f"{_PREFIXES.get(level, '')}{message}\n")

    def error(self, message: str) -> None:
        self.log(Level.ERR, message)

    def warning(self, message: str) -> None:
        self.log(Level.WARNING, message)

    def info(self, message: str) -> None:
        self.log(Level.INFO, message)

    def debug(self, message: str) -> None:
        self.log(Level.DEBUG, message)

    def increase_verbosity(self) -> None:
        """Show one more level of messages."""
        self.max_level += 1


journal = Journal()