"""Page size limits (``PAGINATION_*``).

Two families of list fields share these bounds:

* ``blocks``, ``transactions`` and ``wealthyAddresses`` take
  ``pageNumber``/``pageSize`` and use ``default_limit``/``max_limit``;
* ``tokenTransfers`` is a Relay connection and uses the ``cursor_*`` pair.

A requested size above the maximum is silently capped, never rejected.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    default_limit: int = Field(default=10, ge=1, le=1000)
    max_limit: int = Field(default=100, ge=1, le=10_000)
    cursor_page_size: int = Field(default=10, ge=1, le=1000)
    max_cursor_page_size: int = Field(default=100, ge=1, le=10_000)

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
