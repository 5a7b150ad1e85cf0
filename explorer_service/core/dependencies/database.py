"""Request-scoped database session for REST handlers.

GraphQL resolvers do not use this: they open their own sessions from the
factory carried in the GraphQL context, so sibling fields can run
concurrently.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from explorer_service.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    async with get_async_session() as session:
        yield session
