"""Engine and session factory for the ledger database.

Everything here is read-only from the explorer's point of view: sessions are
opened, queried and closed, never committed.
"""

from .session import (
    AsyncSessionLocal,
    close_database,
    engine,
    get_async_session,
    init_database,
)

__all__ = [
    "AsyncSessionLocal",
    "close_database",
    "engine",
    "get_async_session",
    "init_database",
]
