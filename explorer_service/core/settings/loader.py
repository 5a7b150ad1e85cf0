"""One cached instance per settings domain.

Each loader validates its environment on first call and then hands back the
same frozen object. Tests that change environment variables call
``clear_all_settings_caches()`` from ``unified``.
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .graphql import GraphQLSettings
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .postgres import PostgresSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    return AppSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> PostgresSettings:
    """Connection settings for the indexed ledger database."""
    return PostgresSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    return PaginationSettings()


@lru_cache(maxsize=1)
def get_graphql_settings() -> GraphQLSettings:
    return GraphQLSettings()
