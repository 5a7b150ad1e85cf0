"""Process-wide async engine over the ledger database.

With the database disabled (local runs, tests) the engine points at a SQLite
file through aiosqlite so the app still imports and serves ``/health``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from explorer_service.core.settings import get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

FALLBACK_URL = "sqlite+aiosqlite:///./explorer.db"

db_settings = get_db_settings()


def _build_engine() -> AsyncEngine:
    if not db_settings.is_configured:
        logger.warning("Ledger database disabled, using local SQLite", extra={"url": FALLBACK_URL})
        return create_async_engine(FALLBACK_URL, echo=db_settings.echo)
    return create_async_engine(db_settings.url, **db_settings.sqlalchemy_engine_kwargs())


engine = _build_engine()

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Session that is closed (and its connection returned) on exit."""
    async with AsyncSessionLocal() as session:
        yield session


async def init_database() -> None:
    """Round-trip ``SELECT 1`` so a bad URL fails at startup, not on the first query."""
    safe_url = engine.url.render_as_string(hide_password=True)
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Ledger database unreachable", extra={"url": safe_url})
        raise
    logger.info("Ledger database reachable", extra={"url": safe_url})


async def close_database() -> None:
    await engine.dispose()
    logger.info("Ledger database pool disposed")


__all__ = [
    "AsyncSessionLocal",
    "close_database",
    "engine",
    "get_async_session",
    "init_database",
]
