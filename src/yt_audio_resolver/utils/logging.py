"""Console log formatting for the resolver service."""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Any, Literal


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name and dims the logger name.

    Colours are only emitted when the target stream is a TTY and the
    ``NO_COLOR`` environment variable is unset, so log files and piped
    output stay plain.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",  # cyan
        logging.INFO: "\033[32m",  # green
        logging.WARNING: "\033[33m",  # yellow
        logging.ERROR: "\033[31m",  # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    DIM = "\033[2m"
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: Literal["%", "{", "$"] = "%",
        validate: bool = True,
        *,
        stream: IO[Any] | None = None,
    ) -> None:
        super().__init__(fmt, datefmt, style, validate)
        # Stream the owning handler writes to; sys.stderr when unset.
        self._stream = stream

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = self._stream or sys.stderr
        isatty = getattr(stream, "isatty", None)
        return callable(isatty) and bool(isatty())

    def format(self, record: logging.LogRecord) -> str:
        if not self._use_color():
            return super().format(record)

        colored = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelno, "")
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        colored.name = f"{self.DIM}{record.name}{self.RESET}"
        return super().format(colored)
