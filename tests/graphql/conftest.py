"""GraphQL test fixtures.

Provides:
- A ``GraphQLContext`` bound to the seeded test database
- ``run_query`` to execute operations against the schema
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from explorer_service.features.graphql.context import GraphQLContext
from explorer_service.features.graphql.schema import schema

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
    from strawberry.types import ExecutionResult


@pytest.fixture
def graphql_context(session_factory: async_sessionmaker[AsyncSession]) -> GraphQLContext:
    return GraphQLContext(session_factory=session_factory, correlation_id="test-correlation-id")


@pytest.fixture
def run_query(
    graphql_context: GraphQLContext,
) -> Callable[..., Awaitable[ExecutionResult]]:
    """Execute a query against the default schema.

    Example:
        result = await run_query("{ totalTransactionCount }")
        assert result.data == {"totalTransactionCount": 6}
    """

    async def _run(query: str, variables: dict[str, Any] | None = None, *, target=schema):
        return await target.execute(query, variable_values=variables, context_value=graphql_context)

    return _run
