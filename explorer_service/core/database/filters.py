"""Composable pieces of a ``SELECT``.

A ``QueryDescriptor`` is rendered by applying its filters, in order, to a
bare ``select(model)``. Each filter is a small value object with one
``apply(statement) -> statement`` method, so repositories can add cursor or
paging clauses to a descriptor without rebuilding it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import Select

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute
    from sqlalchemy.sql.expression import ColumnElement

SortOrder = Literal["asc", "desc"]


class StatementFilter(ABC):
    @abstractmethod
    def apply(self, statement: Select[Any]) -> Select[Any]: ...


class Where(StatementFilter):
    """Predicates ANDed into the WHERE clause; no predicates is a no-op."""

    def __init__(self, *predicates: ColumnElement[bool]):
        self.predicates = predicates

    def apply(self, statement: Select[Any]) -> Select[Any]:
        return statement.where(*self.predicates) if self.predicates else statement


class Join(StatementFilter):
    """Inner join, e.g. token transfers onto their transaction's block position."""

    def __init__(self, target: Any, onclause: ColumnElement[bool] | None = None):
        self.target = target
        self.onclause = onclause

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if self.onclause is None:
            return statement.join(self.target)
        return statement.join(self.target, self.onclause)


class OrderBy(StatementFilter):
    """ORDER BY over parallel sequences of columns and directions.

    ``OrderBy([Block.number, Block.hash], ["desc", "desc"])``. A single
    direction string applies to every column.
    """

    def __init__(
        self,
        columns: Sequence[InstrumentedAttribute[Any]],
        directions: SortOrder | Sequence[SortOrder] = "asc",
    ):
        self.columns = list(columns)
        self.directions = (
            [directions] * len(self.columns) if isinstance(directions, str) else list(directions)
        )
        if len(self.directions) != len(self.columns):
            raise ValueError(f"{len(self.columns)} sort columns but {len(self.directions)} directions")

    def apply(self, statement: Select[Any]) -> Select[Any]:
        clauses = [
            column.desc() if direction == "desc" else column.asc()
            for column, direction in zip(self.columns, self.directions, strict=True)
        ]
        return statement.order_by(*clauses)


class LimitOffset(StatementFilter):
    """LIMIT/OFFSET for ``pageNumber``/``pageSize`` lists; ``limit=None`` means unbounded."""

    def __init__(self, limit: int | None, offset: int = 0):
        self.limit = limit
        self.offset = offset

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if self.limit is not None:
            statement = statement.limit(self.limit)
        return statement.offset(self.offset) if self.offset else statement


__all__ = [
    "Join",
    "LimitOffset",
    "OrderBy",
    "SortOrder",
    "StatementFilter",
    "Where",
]
