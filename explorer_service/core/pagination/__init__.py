"""Cursor-based (keyset) pagination.

Usage:
    from explorer_service.core.pagination import ConnectionArgs

    args = ConnectionArgs(first=10, after=cursor)
    connection = await repo.paginate_cursor(session, descriptor, args)
    for edge in connection.edges:
        print(edge.node, edge.cursor)

The cursor encodes the ordering key of a row. Cursors are opaque base64
strings that clients pass back unchanged.
"""

from explorer_service.core.pagination.args import ConnectionArgs, PageRequest
from explorer_service.core.pagination.cursor import CursorCodec, CursorData
from explorer_service.core.pagination.filters import CursorFilter, PageDirection
from explorer_service.core.pagination.schemas import Connection, Edge, PageInfo

__all__ = [
    "Connection",
    "ConnectionArgs",
    "CursorCodec",
    "CursorData",
    "CursorFilter",
    "Edge",
    "PageDirection",
    "PageInfo",
    "PageRequest",
]
