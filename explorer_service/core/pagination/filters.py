"""Cursor filter for SQLAlchemy queries.

The CursorFilter implements the seek/keyset pagination method:
- Instead of OFFSET, we use WHERE conditions to seek directly to the cursor position
- Results are stable when rows are appended between pages

How it works:
    For ORDER BY block_number DESC, index DESC with cursor at (100, 2):
    WHERE (block_number < 100) OR (block_number = 100 AND index < 2)
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import DateTime, Integer, Numeric, Select, String, and_, or_

from explorer_service.core.database.filters import SortOrder, StatementFilter
from explorer_service.core.database.types import Hash, HashType
from explorer_service.core.exceptions import AppException, InvalidCursorException
from explorer_service.core.pagination.cursor import CursorCodec, CursorData

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.orm import InstrumentedAttribute

PageDirection = Literal["after", "before"]

# Integer columns are BIGINT at most.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class CursorFilter(StatementFilter):
    """Apply cursor-based pagination to a SQLAlchemy query.

    The filter adds:
    1. WHERE conditions to seek past the cursor
    2. ORDER BY clause for consistent ordering (reversed for "before")
    3. LIMIT clause of ``limit + 1`` so callers can detect another page

    Example:
        stmt = CursorFilter(
            cursor=request_cursor,
            order_by=[(Transaction.block_number, "desc"), (Transaction.index, "desc")],
            limit=10,
        ).apply(select(Transaction))

    Raises:
        InvalidCursorException: If the cursor does not decode, or its keys do
            not match the ordering of this query.
    """

    def __init__(
        self,
        cursor: str | None,
        order_by: Sequence[tuple[InstrumentedAttribute[Any], SortOrder]],
        *,
        limit: int,
        direction: PageDirection = "after",
    ) -> None:
        self.cursor = cursor
        self.order_by = list(order_by)
        self.limit = limit
        self.direction = direction

        self._cursor_values: list[Any] | None = None
        if cursor is not None:
            self._cursor_values = self._typed_values(CursorCodec.decode(cursor))

    def apply(self, statement: Select[Any]) -> Select[Any]:
        statement = self._apply_ordering(statement)
        if self._cursor_values is not None:
            statement = statement.where(self._seek_condition(self._cursor_values))
        return statement.limit(self.limit + 1)

    @property
    def sort_fields(self) -> list[str]:
        """Get list of sort field names."""
        return [col.key for col, _ in self.order_by]

    def _apply_ordering(self, statement: Select[Any]) -> Select[Any]:
        for column, order in self.order_by:
            effective = order
            if self.direction == "before":
                effective = "asc" if order == "desc" else "desc"
            statement = statement.order_by(column.desc() if effective == "desc" else column.asc())
        return statement

    def _seek_condition(self, values: list[Any]) -> Any:
        """Build the compound keyset condition.

        For columns (a, b, c) with cursor values (v1, v2, v3):
            (a op v1) OR
            (a = v1 AND b op v2) OR
            (a = v1 AND b = v2 AND c op v3)
        """
        or_conditions = []
        for i, (column, order) in enumerate(self.order_by):
            seek_lower = (order == "desc") == (self.direction == "after")
            compare = column < values[i] if seek_lower else column > values[i]
            eq_conditions = [self.order_by[j][0] == values[j] for j in range(i)]
            or_conditions.append(and_(*eq_conditions, compare) if eq_conditions else compare)
        return or_(*or_conditions)

    def _typed_values(self, data: CursorData) -> list[Any]:
        if list(data.values) != self.sort_fields:
            raise InvalidCursorException(
                extra={"expected": self.sort_fields, "received": list(data.values)},
            )
        return [
            self._convert_cursor_value(column, data.values[column.key])
            for column, _ in self.order_by
        ]

    def _convert_cursor_value(self, column: InstrumentedAttribute[Any], value: Any) -> Any:
        """Convert a JSON cursor value back to the column's Python type."""
        column_type = column.type
        try:
            if isinstance(column_type, HashType) and isinstance(value, str):
                return Hash.cast(value, column_type.byte_count)
            if isinstance(column_type, DateTime) and isinstance(value, str):
                return datetime.fromisoformat(value)
            if isinstance(column_type, Integer) and type(value) is int:
                if not INT64_MIN <= value <= INT64_MAX:
                    raise ValueError(f"{value} is out of range")
                return value
            if isinstance(column_type, Numeric) and isinstance(value, str):
                return Decimal(value)
            if isinstance(column_type, String) and isinstance(value, str):
                return value
        except (AppException, InvalidOperation, ValueError) as e:
            raise InvalidCursorException(extra={"field": column.key}) from e
        raise InvalidCursorException(extra={"field": column.key})


__all__ = ["CursorFilter", "PageDirection"]
