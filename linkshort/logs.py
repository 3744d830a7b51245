"""Process-wide application logger."""

from __future__ import annotations

import logging
import sys
import threading
from dataclasses import dataclass, field

_FORMAT = "time=%(asctime)s level=%(levelname)s msg=%(message)s"

_default = logging.getLogger("linkshort")


@dataclass
class _State:
    logger: logging.Logger = field(default=_default)
    configured: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock)


_state = _State()


class _StdoutHandler(logging.StreamHandler):
    """Write to whatever ``sys.stdout`` is at the time of each record."""

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stdout
        super().emit(record)


def get_logger() -> logging.Logger:
    """Return the current application logger."""
    return _state.logger


def set_logger(logger: logging.Logger) -> None:
    """Replace the application logger, for instance in tests."""
    _state.logger = logger


def setup_logger() -> None:
    """Configure the default logger to write to stdout; runs only once."""
    with _state.lock:
        if _state.configured:
            return
        _state.configured = True
        handler = _StdoutHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        _default.addHandler(handler)
        _default.setLevel(logging.INFO)
        _default.propagate = False
        _state.logger = _default