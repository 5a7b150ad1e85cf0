"""Deferred log messages.

Repositories describe every lookup at DEBUG (hashes rendered as hex, row
counts). ``LazyLoggerAdapter`` accepts a zero-argument callable as the
message, or as any positional argument, and only calls it when the record
will actually be emitted.
"""

from __future__ import annotations

import logging
from typing import Any


def _resolve(value: Any) -> Any:
    return value() if callable(value) else value


class LazyLoggerAdapter(logging.LoggerAdapter):
    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        super().log(level, _resolve(msg), *map(_resolve, args), **kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, **kwargs)


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """``logging.getLogger(name)`` wrapped in a lazy adapter; ``context`` becomes ``extra``."""
    return LazyLoggerAdapter(logging.getLogger(name), context)


__all__ = ["LazyLoggerAdapter", "get_lazy_logger"]
