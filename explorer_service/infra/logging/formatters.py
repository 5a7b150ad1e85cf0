"""JSON Lines formatter for explorer logs."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

# Everything a bare LogRecord carries; only attributes added on top of these
# (``extra=`` or the context filter) are copied into the payload.
_BUILTIN_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message"}


class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON object.

    ``fmt_keys`` maps output keys to record attributes; ``static`` adds fixed
    fields such as ``{"service": "explorer-service"}``. A repository miss
    comes out as::

        {"level": "INFO", "logger": "explorer_service.features.chain.repository",
         "message": "Entity not found", "timestamp": "2025-01-01T00:00:00.123Z",
         "entity": "Transaction", "correlation_id": "..."}
    """

    def __init__(
        self,
        fmt_keys: dict[str, str] | None = None,
        static: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.fmt_keys = fmt_keys or {"level": "levelname", "logger": "name", "message": "message"}
        self.static = dict(static or {})

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        created = datetime.fromtimestamp(record.created, tz=UTC)

        payload: dict[str, Any] = {key: getattr(record, attr, None) for key, attr in self.fmt_keys.items()}
        payload["timestamp"] = created.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_trace"] = self.formatStack(record.stack_info)
        payload.update(self.static)

        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _BUILTIN_ATTRS and key not in payload
        )
        # json.dumps escapes embedded newlines, so tracebacks stay on one line
        return json.dumps(payload, ensure_ascii=False, default=str)
