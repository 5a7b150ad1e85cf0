"""Connection arguments and page-size resolution.

``ConnectionArgs`` carries the Relay-style arguments a connection field
accepts (``first``/``after``/``last``/``before``) plus the legacy ``count``
alias. ``resolve`` turns them into a single ``PageRequest``.

Page size rules, evaluated in order:

    before given   -> last, or the default size (``count`` is ignored)
    count given    -> count
    first or last  -> that value
    otherwise      -> the default size

The result is capped at the configured maximum.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel

from explorer_service.core.exceptions import InvalidArgumentException
from explorer_service.core.pagination.filters import PageDirection


@dataclass(frozen=True, slots=True)
class PageRequest:
    """Resolved page window: how many rows, from where, in which direction."""

    size: int
    cursor: str | None
    direction: PageDirection


class ConnectionArgs(BaseModel):
    """Pagination arguments accepted by connection fields."""

    first: int | None = None
    after: str | None = None
    last: int | None = None
    before: str | None = None
    count: int | None = None

    model_config = {"frozen": True}

    def resolve(self, *, default_size: int, max_size: int) -> PageRequest:
        """Validate the argument combination and compute the page request.

        Raises:
            InvalidArgumentException: For negative sizes or conflicting arguments.
        """
        self._validate()

        backward = self.last is not None or self.before is not None
        if self.before is not None:
            size = self.last if self.last is not None else default_size
        elif self.count is not None:
            size = self.count
        elif self.first is not None:
            size = self.first
        elif self.last is not None:
            size = self.last
        else:
            size = default_size

        return PageRequest(
            size=min(size, max_size),
            cursor=self.before if backward else self.after,
            direction="before" if backward else "after",
        )

    def _validate(self) -> None:
        for name in ("first", "last", "count"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise InvalidArgumentException(
                    f"`{name}` must be a non-negative integer.",
                    extra={name: value},
                )
        if self.first is not None and self.last is not None:
            raise InvalidArgumentException("Cannot combine `first` and `last`.")
        if self.after is not None and self.before is not None:
            raise InvalidArgumentException("Cannot combine `after` and `before`.")
        if self.first is not None and self.before is not None:
            raise InvalidArgumentException("Cannot combine `first` with `before`.")
        if self.last is not None and self.after is not None:
            raise InvalidArgumentException("Cannot combine `last` with `after`.")


__all__ = ["ConnectionArgs", "PageRequest"]
