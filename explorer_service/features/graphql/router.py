"""``/graphql`` endpoint: strawberry's ``GraphQLRouter`` over the explorer schema.

Mounted by ``app.router.setup_routers`` under ``GraphQLSettings.path``.
"""

from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import APIRouter, BackgroundTasks, Request, Response
from strawberry.fastapi import GraphQLRouter

from explorer_service.core.settings import get_graphql_settings
from explorer_service.features.graphql.context import GraphQLContext
from explorer_service.features.graphql.schema import schema
from explorer_service.infra.database import AsyncSessionLocal
from explorer_service.infra.logging.context import set_log_context

logger = logging.getLogger(__name__)


async def get_graphql_context(
    request: Request,
    response: Response,
    background_tasks: BackgroundTasks,
) -> GraphQLContext:
    """Build the per-request context; resolvers open sessions from ``AsyncSessionLocal``."""
    correlation_id = getattr(request.state, "correlation_id", None)
    if correlation_id:
        set_log_context(correlation_id=correlation_id)

    return GraphQLContext(
        request=request,
        response=response,
        background_tasks=background_tasks,
        session_factory=AsyncSessionLocal,
        correlation_id=correlation_id,
    )


def create_graphql_router() -> APIRouter:
    """Router serving POST queries and, if configured, the IDE on GET."""
    settings = get_graphql_settings()

    graphql_app = GraphQLRouter(
        schema,
        context_getter=cast("Any", get_graphql_context),
        graphql_ide=settings.graphql_ide or None,
    )

    logger.debug("GraphQL router created", extra={"graphql_ide": settings.graphql_ide})
    return graphql_app


__all__ = ["create_graphql_router", "get_graphql_context"]
