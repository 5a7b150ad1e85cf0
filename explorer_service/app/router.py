"""HTTP surface of the explorer: ``/health`` plus the GraphQL mount."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from explorer_service.core.dependencies.database import get_db_session
from explorer_service.core.settings import get_app_settings, get_graphql_settings

if TYPE_CHECKING:
    from fastapi import FastAPI

    from explorer_service.core.settings.app import AppSettings
    from explorer_service.core.settings.graphql import GraphQLSettings

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["health"])


@health_router.get("/health", summary="Service and database health")
async def health_check(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> JSONResponse:
    """200 when the ledger database answers ``SELECT 1``, 503 otherwise."""
    app_settings = get_app_settings()
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check database probe failed")
        database = "unavailable"
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        database = "ok"
        status_code = status.HTTP_200_OK

    return JSONResponse(
        status_code=status_code,
        content={
            "status": "ok" if status_code == status.HTTP_200_OK else "degraded",
            "service": app_settings.service_name,
            "version": app_settings.version,
            "database": database,
        },
    )


def setup_routers(
    app: FastAPI,
    app_settings: AppSettings | None = None,
    graphql_settings: GraphQLSettings | None = None,
) -> None:
    """Register the health endpoint and, when enabled, the GraphQL endpoint."""
    app_settings = app_settings or get_app_settings()
    graphql_settings = graphql_settings or get_graphql_settings()

    app.include_router(health_router)

    if graphql_settings.enabled:
        from explorer_service.features.graphql.router import create_graphql_router

        app.include_router(create_graphql_router(), prefix=graphql_settings.path, tags=["graphql"])
        logger.info("GraphQL endpoint registered", extra={"path": graphql_settings.path})
    else:
        logger.info("GraphQL endpoint disabled")

    logger.debug("Routers configured", extra={"service": app_settings.service_name})


__all__ = ["health_router", "setup_routers"]
