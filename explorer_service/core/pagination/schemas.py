"""Relay-style page containers returned by ``BaseRepository.paginate``.

Nodes are ORM rows; the GraphQL layer maps them onto strawberry types.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

NodeT = TypeVar("NodeT")


class PageInfo(BaseModel):
    """Navigation flags and the cursors bracketing the page.

    ``start_cursor``/``end_cursor`` are ``None`` exactly when the page is empty.
    """

    has_previous_page: bool
    has_next_page: bool
    start_cursor: str | None = None
    end_cursor: str | None = None


class Edge(BaseModel, Generic[NodeT]):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    node: NodeT
    cursor: str


class Connection(BaseModel, Generic[NodeT]):
    """Edges in display order (newest block first) plus ``page_info``.

    ``tokenTransfers(first: 2)`` then ``tokenTransfers(first: 2, after: <end_cursor>)``
    walks forward; ``last``/``before`` walk back from a ``start_cursor``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    edges: list[Edge[NodeT]]
    page_info: PageInfo


__all__ = ["Connection", "Edge", "PageInfo"]
