"""Minimal generic repository for read-only query execution.

Repositories execute query descriptors with an explicit session. They are
the only place that talks to the database, and they translate storage
failures into ``InternalServerException`` so callers see a single error
vocabulary.

Example:
    from explorer_service.core.database import BaseRepository

    class BlockRepository(BaseRepository[Block]):
        async def latest(self, session: AsyncSession) -> Sequence[Block]:
            descriptor = QueryDescriptor(Block, order_by=((Block.number, "desc"),))
            return await self.list_page(session, descriptor.with_page(limit=1))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from explorer_service.core.exceptions import InternalServerException
from explorer_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Result, Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from explorer_service.core.database.query import AggregateDescriptor, QueryDescriptor
    from explorer_service.core.pagination import Connection, ConnectionArgs


class BaseRepository[T]:
    """Generic read repository.

    Provides:
        - get_one(session, descriptor) -> T | None
        - list_page(session, descriptor) -> Sequence[T]
        - scalar(session, aggregate) -> Any
        - paginate_cursor(session, descriptor, args, ...) -> Connection[T]

    Session is always explicit - no hidden state.
    """

    __slots__ = ("model", "_logger", "_lazy")

    def __init__(self, model: type[T]) -> None:
        """Initialize repository with model class.

        Args:
            model: SQLAlchemy model class (e.g., Transaction, Block)
        """
        self.model = model
        # Standard logger for INFO/WARNING/ERROR
        self._logger = logging.getLogger(f"repository.{model.__name__}")
        # Lazy logger for DEBUG (zero overhead when DEBUG disabled)
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    async def get_one(self, session: AsyncSession, descriptor: QueryDescriptor[T]) -> T | None:
        """Return the single row matched by ``descriptor`` or None.

        Raises:
            InternalServerException: On storage failure or if more than one
                row matches.
        """
        result = await self._execute(session, descriptor.to_statement(), "db.get_one")
        rows = result.scalars().all()
        if len(rows) > 1:
            self._logger.error(
                "Lookup matched more than one row",
                extra={"entity": self.model.__name__, "operation": "db.get_one", "rows": len(rows)},
            )
            raise InternalServerException(extra={"entity": self.model.__name__})
        instance = rows[0] if rows else None

        self._lazy.debug(
            lambda: f"db.get_one: {self.model.__name__} -> {'found' if instance else 'not found'}"
        )
        return instance

    async def list_page(self, session: AsyncSession, descriptor: QueryDescriptor[T]) -> Sequence[T]:
        """Return the rows in the descriptor's page window, in order."""
        result = await self._execute(session, descriptor.to_statement(), "db.list_page")
        items = result.scalars().all()

        self._lazy.debug(
            lambda: f"db.list_page: {self.model.__name__}(limit={descriptor.limit}, offset={descriptor.offset}) -> {len(items)} items"
        )
        return items

    async def scalar(self, session: AsyncSession, aggregate: AggregateDescriptor) -> Any:
        """Run a single-value aggregate.

        An aggregate always yields exactly one row. A missing row means the
        query is broken, which is reported as an internal error rather than
        a default value.

        Raises:
            InternalServerException: On storage failure or an empty result set.
        """
        result = await self._execute(session, aggregate.to_statement(), "db.scalar")
        row = result.first()
        if row is None:
            self._logger.error(
                "Aggregate returned no rows",
                extra={"entity": self.model.__name__, "operation": "db.scalar"},
            )
            raise InternalServerException(extra={"entity": self.model.__name__})
        value = row[0]

        self._lazy.debug(lambda: f"db.scalar: {self.model.__name__} -> {value!r}")
        return value

    async def paginate_cursor(
        self,
        session: AsyncSession,
        descriptor: QueryDescriptor[T],
        args: ConnectionArgs,
        *,
        default_size: int,
        max_size: int,
    ) -> Connection[T]:
        """Execute a cursor-paginated query.

        Implements keyset pagination in both directions. The descriptor's
        ``order_by`` defines the ordering key encoded into each edge cursor.

        Args:
            session: Database session
            descriptor: Query without a page window
            args: Connection arguments from the caller
            default_size: Page size when the arguments do not set one
            max_size: Upper bound on the page size

        Returns:
            Connection[T] with edges and page_info

        Raises:
            InvalidArgumentException: On conflicting or negative arguments.
            InvalidCursorException: If the cursor cannot be decoded.
            InternalServerException: On storage failure.
        """
        from explorer_service.core.pagination import (
            Connection,
            CursorCodec,
            CursorFilter,
            Edge,
            PageInfo,
        )

        request = args.resolve(default_size=default_size, max_size=max_size)
        cursor_filter = CursorFilter(
            cursor=request.cursor,
            order_by=descriptor.order_by,
            limit=request.size,
            direction=request.direction,
        )
        statement = cursor_filter.apply(descriptor.base_statement())

        result = await self._execute(session, statement, "db.paginate_cursor")
        rows = list(result.scalars().all())

        # We fetched limit+1 to detect another page
        has_more = len(rows) > request.size
        if has_more:
            rows = rows[: request.size]

        if request.direction == "before":
            rows.reverse()

        sort_fields = cursor_filter.sort_fields
        edges: list[Edge[Any]] = [
            Edge(node=row, cursor=CursorCodec.create_cursor(row, sort_fields)) for row in rows
        ]

        if request.direction == "after":
            has_next = has_more
            has_prev = request.cursor is not None
        else:
            has_next = request.cursor is not None
            has_prev = has_more

        page_info = PageInfo(
            has_previous_page=has_prev,
            has_next_page=has_next,
            start_cursor=edges[0].cursor if edges else None,
            end_cursor=edges[-1].cursor if edges else None,
        )

        self._lazy.debug(
            lambda: f"db.paginate_cursor: {self.model.__name__}(limit={request.size}, {request.direction}) -> {len(edges)} items, has_next={has_next}"
        )
        return Connection(edges=edges, page_info=page_info)

    async def _execute(
        self,
        session: AsyncSession,
        statement: Select[Any],
        operation: str,
    ) -> Result[Any]:
        try:
            return await session.execute(statement)
        except (SQLAlchemyError, TimeoutError) as exc:
            self._logger.exception(
                "Storage failure",
                extra={"entity": self.model.__name__, "operation": operation},
            )
            raise InternalServerException(
                extra={"entity": self.model.__name__, "operation": operation},
            ) from exc


__all__ = ["BaseRepository"]
