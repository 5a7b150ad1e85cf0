"""Root logger wiring for the explorer.

Handlers hang off the root logger behind a ``QueueHandler``: request code only
enqueues records, and a ``QueueListener`` thread does the stderr and file I/O.
Module loggers (``logging.getLogger(__name__)``) simply propagate.
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from explorer_service.infra.logging.context import ContextInjectingFilter
from explorer_service.infra.logging.formatters import JSONFormatter

if TYPE_CHECKING:
    from explorer_service.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)

PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(correlation_id)s] %(message)s"

_listener: QueueListener | None = None
_configured = False


def shutdown() -> None:
    """Drain queued records and stop the listener thread. Idempotent."""
    global _listener

    if _listener is not None:
        _listener.stop()
        _listener = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **overrides: Any,
) -> None:
    """Configure logging from ``LOG_*`` settings the first time it is called.

    The app lifespan and the CLI entrypoint both call this; later calls are
    no-ops unless ``force`` is set.
    """
    global _configured

    if _configured and not force:
        return

    if log_settings is None:
        from explorer_service.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**{**log_settings.to_logging_kwargs(), **overrides})
    _configured = True


def configure_logging(
    log_level: str = "INFO",
    *,
    service_name: str = "explorer-service",
    json_logs: bool = True,
    console_enabled: bool = True,
    console_level: str | None = None,
    file_path: str | Path | None = None,
    file_level: str | None = None,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    include_context: bool = True,
    capture_warnings: bool = True,
    **unknown: Any,
) -> None:
    """Install the queue-backed handlers on the root logger.

    Calling it again replaces the previous listener and handlers.
    """
    global _listener

    shutdown()
    logging.captureWarnings(capture_warnings)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {"level": log_level.upper(), "handlers": []},
        }
    )

    formatter = _formatter(json_logs, service_name, include_context)
    sinks: list[logging.Handler] = []

    if console_enabled:
        console = logging.StreamHandler()
        console.setLevel((console_level or log_level).upper())
        console.setFormatter(formatter)
        sinks.append(console)

    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            path, maxBytes=file_max_bytes, backupCount=file_backup_count, encoding="utf-8"
        )
        rotating.setLevel((file_level or log_level).upper())
        rotating.setFormatter(formatter)
        sinks.append(rotating)

    if sinks:
        queue: Queue[logging.LogRecord] = Queue()
        _listener = QueueListener(queue, *sinks, respect_handler_level=True)
        _listener.start()
        atexit.register(shutdown)
        enqueue = QueueHandler(queue)
        # handler filter, so records propagated from module loggers are enriched too
        if include_context:
            enqueue.addFilter(ContextInjectingFilter())
        logging.getLogger().addHandler(enqueue)

    if unknown:
        logger.debug("Ignoring unknown logging options: %s", ", ".join(sorted(unknown)))


def _formatter(json_logs: bool, service_name: str, include_context: bool) -> logging.Formatter:
    if json_logs:
        return JSONFormatter(
            fmt_keys={"level": "levelname", "logger": "name", "message": "message"},
            static={"service": service_name},
        )
    if include_context:
        return logging.Formatter(PLAIN_FORMAT, defaults={"correlation_id": "-"})
    return logging.Formatter("%(asctime)s %(levelname)-8s %(name)s %(message)s")


__all__ = ["configure_logging", "setup_logging", "shutdown"]
