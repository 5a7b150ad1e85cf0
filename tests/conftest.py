"""Pytest configuration and shared fixtures.

Organization:
    - Application Fixtures: FastAPI app and HTTP client
    - Database Fixtures: SQLAlchemy engine, session factory and the seeded ledger

The database is a file-backed SQLite database per test so that several
sessions (one per GraphQL resolver) see the same data.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
import os
from typing import TYPE_CHECKING

from httpx import ASGITransport, AsyncClient
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from tests.fixtures.ledger import seed_ledger

if TYPE_CHECKING:
    from pathlib import Path

    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine

    from tests.fixtures.ledger import Ledger

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DB_ENABLED", "false")


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Async engine over a fresh SQLite file with all tables created."""
    from explorer_service.core.database import Base

    # Import models so they register with Base.metadata
    import explorer_service.features.chain.models  # noqa: F401

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'explorer.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session on the test database, rolled back after the test."""
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
async def ledger(session_factory: async_sessionmaker[AsyncSession]) -> Ledger:
    """Seed the shared ledger (see ``tests.fixtures.ledger``)."""
    async with session_factory() as session:
        return await seed_ledger(session)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    """FastAPI application whose database dependency uses the test database."""
    from explorer_service.app.main import create_app
    from explorer_service.core.dependencies.database import get_db_session

    application = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db_session] = override_db_session
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the app without starting a server."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
