"""Opaque keyset cursors.

A cursor names one row of an ordered result by the values of its sort key,
e.g. ``(block_number, log_index)`` for token transfers. It is the URL-safe
base64 of compact JSON::

    {"v":{"block_number":100,"log_index":3}}

Only the exact bytes ``encode`` produces are accepted back. A cursor that
merely decodes to something JSON-shaped, but differently spaced or padded,
is an ``InvalidCursorException``; it never degrades into "first page".
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from explorer_service.core.database.types import Hash
from explorer_service.core.exceptions import InvalidCursorException

# Longest cursor ``decode`` will look at.
MAX_CURSOR_LENGTH = 512


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Hash | Decimal | UUID):
        return str(value)
    return value


class CursorData(BaseModel):
    """Sort-key values of one row, in ORDER BY order.

    Values are JSON scalars; ``CursorFilter`` converts them back to column
    types before they reach SQL.
    """

    model_config = ConfigDict(frozen=True)

    values: dict[str, Any]

    @classmethod
    def from_key(cls, fields: Sequence[str], key: Sequence[Any]) -> CursorData:
        return cls(values=dict(zip(fields, key, strict=True)))

    @property
    def key(self) -> tuple[Any, ...]:
        return tuple(self.values.values())


class CursorCodec:
    @staticmethod
    def encode(data: CursorData) -> str:
        body = json.dumps({"v": {name: _jsonable(v) for name, v in data.values.items()}}, separators=(",", ":"))
        return base64.urlsafe_b64encode(body.encode()).decode()

    @staticmethod
    def decode(cursor: str) -> CursorData:
        """Parse a cursor produced by ``encode``.

        Raises:
            InvalidCursorException: for anything else, including a valid
                payload in a non-canonical encoding.
        """
        if len(cursor) > MAX_CURSOR_LENGTH:
            raise InvalidCursorException(extra={"reason": "cursor too long"})
        try:
            raw = base64.b64decode(cursor.encode("ascii"), altchars=b"-_", validate=True)
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeError, binascii.Error, ValueError, RecursionError) as exc:
            raise InvalidCursorException(extra={"reason": str(exc)}) from exc

        if not isinstance(payload, dict) or payload.keys() != {"v"}:
            raise InvalidCursorException(extra={"reason": "unexpected payload shape"})
        if not isinstance(payload["v"], dict) or not payload["v"]:
            raise InvalidCursorException(extra={"reason": "missing sort values"})

        data = CursorData(values=payload["v"])
        if CursorCodec.encode(data) != cursor:
            raise InvalidCursorException(extra={"reason": "non-canonical encoding"})
        return data

    @staticmethod
    def create_cursor(row: Any, sort_fields: Sequence[str]) -> str:
        """Cursor for an ORM row, e.g. ``create_cursor(transfer, ["block_number", "log_index"])``."""
        return CursorCodec.encode(CursorData(values={name: getattr(row, name) for name in sort_fields}))


__all__ = ["MAX_CURSOR_LENGTH", "CursorCodec", "CursorData"]
