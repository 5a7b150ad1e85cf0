"""Structured logging for the explorer.

JSON Lines on stderr (and optionally a rotating file), written from a queue
listener thread. Request-scoped fields such as ``correlation_id`` and the
GraphQL operation name come from ``set_log_context`` and are stamped on
every record emitted while handling that request.
"""

from explorer_service.infra.logging.config import configure_logging, setup_logging, shutdown
from explorer_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from explorer_service.infra.logging.formatters import JSONFormatter
from explorer_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
