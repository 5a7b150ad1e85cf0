"""``X-Correlation-ID`` propagation.

A client-supplied id is kept when it is short and printable; otherwise a
UUID4 is minted. The id lands in ``request.state.correlation_id``, in the
logging context for the rest of the request, and back on the response.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
import uuid

from starlette.datastructures import Headers, MutableHeaders

from explorer_service.infra.logging.context import clear_log_context, set_log_context

if TYPE_CHECKING:
    from fastapi import FastAPI
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "x-correlation-id"
MAX_CORRELATION_ID_LENGTH = 128


def _accept(candidate: str | None) -> str | None:
    if not candidate:
        return None
    if len(candidate) > MAX_CORRELATION_ID_LENGTH or not candidate.isprintable():
        logger.debug("Replacing malformed correlation id", extra={"length": len(candidate)})
        return None
    return candidate


class CorrelationIDMiddleware:
    """Pure ASGI so streaming responses and lifespan events pass untouched."""

    def __init__(self, app: ASGIApp, header_name: str = CORRELATION_HEADER) -> None:
        self.app = app
        self.header_name = header_name.lower()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        correlation_id = _accept(Headers(scope=scope).get(self.header_name)) or str(uuid.uuid4())
        scope.setdefault("state", {})["correlation_id"] = correlation_id
        set_log_context(correlation_id=correlation_id)

        async def echo_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(self.header_name, correlation_id)
            await send(message)

        try:
            await self.app(scope, receive, echo_header)
        finally:
            clear_log_context()


def configure_middleware(app: FastAPI) -> None:
    app.add_middleware(CorrelationIDMiddleware)


__all__ = ["CorrelationIDMiddleware", "configure_middleware"]
