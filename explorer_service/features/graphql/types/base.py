"""Shared pagination arguments and the Relay ``PageInfo`` type."""

from __future__ import annotations

from typing import Annotated

import strawberry

from explorer_service.core.pagination import PageInfo

FirstArg = Annotated[int | None, strawberry.argument(description="Page size when paging towards older blocks")]
AfterArg = Annotated[str | None, strawberry.argument(description="`endCursor` of the previous page")]
LastArg = Annotated[int | None, strawberry.argument(description="Page size when paging towards newer blocks")]
BeforeArg = Annotated[str | None, strawberry.argument(description="`startCursor` of the following page")]
CountArg = Annotated[
    int | None,
    strawberry.argument(description="Same as `first`; ignored together with `before`"),
]
PageNumberArg = Annotated[int, strawberry.argument(description="1-based page number")]
PageSizeArg = Annotated[int | None, strawberry.argument(description="Rows per page, capped server-side")]


@strawberry.type(name="PageInfo")
class PageInfoType:
    has_previous_page: bool
    has_next_page: bool
    start_cursor: str | None = None
    end_cursor: str | None = None

    @classmethod
    def from_page_info(cls, page_info: PageInfo) -> PageInfoType:
        return cls(**page_info.model_dump())


__all__ = [
    "AfterArg",
    "BeforeArg",
    "CountArg",
    "FirstArg",
    "LastArg",
    "PageInfoType",
    "PageNumberArg",
    "PageSizeArg",
]
