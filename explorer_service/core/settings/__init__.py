"""Explorer configuration, one frozen pydantic-settings model per concern.

``APP_*``, ``DB_*`` (plus a bare ``DATABASE_URL``), ``LOG_*``, ``PAGINATION_*``
and ``GRAPHQL_*`` variables are read from the environment or a ``.env`` file.
Use the ``get_*_settings`` loaders, or ``get_settings()`` for all of them.
"""

from __future__ import annotations

from .loader import (
    get_app_settings,
    get_db_settings,
    get_graphql_settings,
    get_logging_settings,
    get_pagination_settings,
)
from .unified import Settings, clear_all_settings_caches, get_settings

__all__ = [
    "Settings",
    "clear_all_settings_caches",
    "get_app_settings",
    "get_db_settings",
    "get_graphql_settings",
    "get_logging_settings",
    "get_pagination_settings",
    "get_settings",
]
