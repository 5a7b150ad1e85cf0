"""Startup and shutdown of the explorer process.

Logging is configured before anything else logs. The ledger database is
pinged once so a bad ``DATABASE_URL`` stops the deploy instead of failing
the first query. The logging queue listener stops via ``atexit``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from explorer_service.core.settings import get_app_settings, get_db_settings
from explorer_service.infra.database import close_database, init_database
from explorer_service.infra.logging import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    settings = get_app_settings()
    logger.info(
        "Explorer starting",
        extra={"version": settings.version, "environment": settings.environment},
    )

    if get_db_settings().is_configured:
        await init_database()
    else:
        logger.info("Ledger database disabled; skipping connectivity check")

    try:
        yield
    finally:
        await close_database()
        logger.info("Explorer stopped")


__all__ = ["lifespan"]
