"""Request-scoped log fields kept in a ``ContextVar``.

The correlation-id middleware and the GraphQL context getter call
``set_log_context``; every record logged afterwards in the same task (and in
tasks it spawns, which copy the context) carries those fields.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

_fields: ContextVar[dict[str, Any]] = ContextVar("explorer_log_fields", default={})


def set_log_context(**fields: Any) -> None:
    """Merge ``fields`` into the current context, e.g. ``set_log_context(operation="Block")``."""
    _fields.set({**_fields.get(), **fields})


def get_log_context() -> dict[str, Any]:
    return dict(_fields.get())


def clear_log_context() -> None:
    _fields.set({})


class ContextInjectingFilter(logging.Filter):
    """Copy context fields onto each record that passes through.

    Attached to the root queue handler by ``configure_logging``. Attributes
    already on the record (for example from ``extra=``) are left alone.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for name, value in _fields.get().items():
            if name not in record.__dict__:
                setattr(record, name, value)
        return True


__all__ = [
    "ContextInjectingFilter",
    "clear_log_context",
    "get_log_context",
    "set_log_context",
]
