"""Console logging stamped with editor time and frame number.

Every line reads ``[  1.234s F000042] [TAG] message``. Component tags are
plain text in the message (``[LAYERS]``, ``[MENU]``, ``[FILES]``...);
``channel(tag)`` returns a logger bound to one of them.

Environment:
    TILEFORGE_LOG_FILE  also append every line to this file
    TILEFORGE_QUIET     suppress console output (the file still gets it)
"""

from __future__ import annotations
import os
import sys
import time
from typing import Callable, Optional, TextIO


class Logger:
    """Writes timestamped lines to the console and an optional log file."""

    def __init__(self, stream: Optional[TextIO] = None, path: Optional[str] = None,
                 quiet: bool = False):
        self._start_time: float = time.perf_counter()
        self._frame: int = 0
        self.stream = stream
        self.path = path
        self.quiet = quiet
        self.lines_written = 0

    @classmethod
    def from_env(cls) -> Logger:
        return cls(path=os.environ.get("TILEFORGE_LOG_FILE") or None,
                   quiet=bool(os.environ.get("TILEFORGE_QUIET")))

    @property
    def frame(self) -> int:
        return self._frame

    def increment_frame(self) -> None:
        self._frame += 1

    @property
    def elapsed(self) -> float:
        """Seconds since the logger was created."""
        return time.perf_counter() - self._start_time

    def format(self, msg: str) -> str:
        return f"[{self.elapsed:7.3f}s F{self._frame:06d}] {msg}\n"

    def log(self, msg: str) -> None:
        line = self.format(msg)
        if not self.quiet:
            self._write_console(line)
        if self.path:
            with open(self.path, "a", encoding="utf-8") as fh:
                fh.write(line)
        self.lines_written += 1

    def _write_console(self, line: str) -> None:
        out = self.stream or sys.stdout
        try:
            out.write(line)
            out.flush()
        except (OSError, ValueError):
            # Closed or detached stdout (e.g. windowed launch)
            sys.stderr.write(line)

    def channel(self, tag: str) -> Callable[[str], None]:
        """Logger that prefixes every message with ``[tag]``."""
        prefix = f"[{tag}] "
        return lambda msg: self.log(prefix + msg)

    def __call__(self, msg: str) -> None:
        self.log(msg)


_logger: Optional[Logger] = None


def get_logger() -> Logger:
    """Get or create the global logger (configured from the environment)."""
    global _logger
    if _logger is None:
        _logger = Logger.from_env()
    return _logger


def set_logger(logger: Optional[Logger]) -> None:
    """Replace the global logger; None recreates it from the environment on next use."""
    global _logger
    _logger = logger


def log(msg: str) -> None:
    get_logger().log(msg)


def channel(tag: str) -> Callable[[str], None]:
    """Tagged log function that resolves the global logger on every call."""
    prefix = f"[{tag}] "
    return lambda msg: log(prefix + msg)


def increment_frame() -> None:
    get_logger().increment_frame()


def now() -> float:
    """Current time in seconds (high precision)."""
    return time.perf_counter()
