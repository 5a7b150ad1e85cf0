"""Per-request GraphQL context.

Resolvers get a session factory rather than a session. Sibling root fields
run concurrently, and an ``AsyncSession`` must not be shared between
concurrent tasks, so each resolver does::

    async with info.context.session_factory() as session:
        ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
    from starlette.background import BackgroundTasks
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.websockets import WebSocket


@dataclass
class GraphQLContext(BaseContext):
    """What every explorer resolver can reach through ``info.context``.

    ``request``/``response``/``background_tasks`` are the fields strawberry's
    FastAPI integration fills in; ``correlation_id`` mirrors the
    ``X-Correlation-ID`` header set by the middleware.
    """

    request: Request | WebSocket | None = None
    response: Response | None = None
    background_tasks: BackgroundTasks | None = None

    session_factory: async_sessionmaker[AsyncSession] = field(default=None)  # type: ignore[assignment]
    correlation_id: str | None = None


__all__ = ["GraphQLContext"]
