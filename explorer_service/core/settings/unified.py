"""``Settings``: every configuration domain on a single frozen object."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from .app import AppSettings
from .graphql import GraphQLSettings
from .loader import (
    get_app_settings,
    get_db_settings,
    get_graphql_settings,
    get_logging_settings,
    get_pagination_settings,
)
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .postgres import PostgresSettings


@dataclass(frozen=True, slots=True)
class Settings:
    """All settings domains behind one object."""

    app: AppSettings
    db: PostgresSettings
    logging: LoggingSettings
    pagination: PaginationSettings
    graphql: GraphQLSettings

    @property
    def environment(self) -> str:
        return self.app.environment


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached unified settings built from the per-domain loaders."""
    return Settings(
        app=get_app_settings(),
        db=get_db_settings(),
        logging=get_logging_settings(),
        pagination=get_pagination_settings(),
        graphql=get_graphql_settings(),
    )


def clear_all_settings_caches() -> None:
    """Clear all settings caches (for testing)."""
    get_settings.cache_clear()
    get_app_settings.cache_clear()
    get_db_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_pagination_settings.cache_clear()
    get_graphql_settings.cache_clear()
