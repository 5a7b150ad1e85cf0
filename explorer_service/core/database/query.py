"""Immutable query descriptors.

A descriptor captures everything needed to read a list of rows: the root
model, joins, predicates, ordering and an optional page window. Descriptors
are pure values. Nothing touches the database until a repository executes
the statement they produce, so builders can be tested by compiling SQL.

Example:
    descriptor = QueryDescriptor(
        model=Block,
        order_by=((Block.timestamp, "desc"), (Block.number, "desc")),
    ).with_page(limit=10, offset=20)
    rows = (await session.execute(descriptor.to_statement())).scalars().all()
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, func, select

from explorer_service.core.database.filters import (
    Join,
    LimitOffset,
    OrderBy,
    SortOrder,
    StatementFilter,
    Where,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute
    from sqlalchemy.sql.expression import ColumnElement


@dataclass(frozen=True, slots=True, eq=False)
class QueryDescriptor[T]:
    """Declarative description of a list query over ``model``."""

    model: type[T]
    where: tuple[ColumnElement[bool], ...] = ()
    joins: tuple[Join, ...] = ()
    order_by: tuple[tuple[InstrumentedAttribute[Any], SortOrder], ...] = ()
    limit: int | None = None
    offset: int = 0

    @property
    def sort_fields(self) -> list[InstrumentedAttribute[Any]]:
        return [column for column, _ in self.order_by]

    @property
    def sort_orders(self) -> list[SortOrder]:
        return [order for _, order in self.order_by]

    def with_page(self, *, limit: int | None, offset: int = 0) -> QueryDescriptor[T]:
        return replace(self, limit=limit, offset=offset)

    def filters(self, *, ordered: bool = True, paged: bool = True) -> list[StatementFilter]:
        """Statement filters in application order."""
        filters: list[StatementFilter] = [*self.joins, Where(*self.where)]
        if ordered and self.order_by:
            filters.append(OrderBy(self.sort_fields, self.sort_orders))
        if paged:
            filters.append(LimitOffset(self.limit, self.offset))
        return filters

    def base_statement(self) -> Select[tuple[T]]:
        """Joins and predicates only, for callers that apply their own ordering."""
        return self._build(ordered=False, paged=False)

    def to_statement(self) -> Select[tuple[T]]:
        return self._build(ordered=True, paged=True)

    def _build(self, *, ordered: bool, paged: bool) -> Select[tuple[T]]:
        statement: Select[Any] = select(self.model)
        for statement_filter in self.filters(ordered=ordered, paged=paged):
            statement = statement_filter.apply(statement)
        return statement


@dataclass(frozen=True, slots=True, eq=False)
class AggregateDescriptor:
    """Single-value aggregate (``count(*)`` by default) over ``model``."""

    model: type[Any]
    expression: ColumnElement[Any] = field(default_factory=func.count)
    where: tuple[ColumnElement[bool], ...] = ()

    def to_statement(self) -> Select[Any]:
        statement = select(self.expression).select_from(self.model)
        return Where(*self.where).apply(statement)


__all__ = ["AggregateDescriptor", "QueryDescriptor"]
