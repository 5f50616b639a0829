"""Frame-stamped logging for the viewer and its engine."""

from __future__ import annotations
import os
import sys
import time
from typing import List, Optional, TextIO


class Logger:
    """Writes `[elapsed F-frame] message` lines.

    The host loop advances the frame counter once per iteration, so lines
    emitted by the engine during a tick carry the frame they belong to.
    """

    def __init__(self, stream: Optional[TextIO] = None, enabled: Optional[bool] = None):
        self._start_time: float = time.perf_counter()
        self._frame: int = 0
        self._stream = stream
        if enabled is None:
            enabled = os.getenv("LIGHTBOX_QUIET", "").strip().lower() not in ("1", "true", "yes")
        self.enabled = enabled

    @property
    def frame(self) -> int:
        return self._frame

    @frame.setter
    def frame(self, value: int) -> None:
        self._frame = value

    def increment_frame(self) -> None:
        self._frame += 1

    @property
    def elapsed(self) -> float:
        """Seconds since the logger was created."""
        return time.perf_counter() - self._start_time

    def format(self, msg: str) -> str:
        return f"[{self.elapsed:8.3f}s F{self._frame:06d}] {msg}"

    def log(self, msg: str) -> None:
        if not self.enabled:
            return
        line = self.format(msg) + "\n"
        stream = self._stream or sys.stdout
        try:
            stream.write(line)
            stream.flush()
        except (OSError, ValueError):
            # closed or detached stdout (pythonw, piped viewer killed)
            try:
                sys.stderr.write(line)
                sys.stderr.flush()
            except (OSError, ValueError):
                pass

    def __call__(self, msg: str) -> None:
        self.log(msg)


class MemoryLogger(Logger):
    """Logger that keeps lines in memory instead of printing them."""

    def __init__(self):
        super().__init__(enabled=True)
        self.lines: List[str] = []

    def log(self, msg: str) -> None:
        self.lines.append(msg)

    def find(self, tag: str) -> List[str]:
        return [line for line in self.lines if line.startswith(tag)]


_logger: Optional[Logger] = None


def get_logger() -> Logger:
    """Get or create the global logger instance."""
    global _logger
    if _logger is None:
        _logger = Logger()
    return _logger


def set_logger(logger: Optional[Logger]) -> Optional[Logger]:
    """Replace the global logger, returning the previous one."""
    global _logger
    previous = _logger
    _logger = logger
    return previous


def log(msg: str) -> None:
    get_logger().log(msg)


def get_frame() -> int:
    return get_logger().frame


def increment_frame() -> None:
    get_logger().increment_frame()

