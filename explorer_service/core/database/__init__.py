"""Core database package: declarative base, hash types, query descriptors.

Base Classes and Mixins:
    - Base: Declarative base with constraint naming convention
    - TimestampMixin: inserted_at, updated_at tracking

Types:
    - Hash: Fixed-width chain hash value
    - HashType: bytea column mapping for Hash

Queries:
    - QueryDescriptor[T]: Immutable list query description
    - AggregateDescriptor: Single-value aggregate
    - StatementFilter, Where, Join, OrderBy, LimitOffset: Statement filters

Repository:
    - BaseRepository[T]: Query execution with explicit session passing
"""

from explorer_service.core.database.base import NAMING_CONVENTION, Base, TimestampMixin
from explorer_service.core.database.filters import (
    Join,
    LimitOffset,
    OrderBy,
    SortOrder,
    StatementFilter,
    Where,
)
from explorer_service.core.database.query import AggregateDescriptor, QueryDescriptor
from explorer_service.core.database.repository import BaseRepository
from explorer_service.core.database.types import ADDRESS_BYTES, FULL_BYTES, Hash, HashType

__all__ = [
    "ADDRESS_BYTES",
    "FULL_BYTES",
    "NAMING_CONVENTION",
    "AggregateDescriptor",
    "Base",
    "BaseRepository",
    "Hash",
    "HashType",
    "Join",
    "LimitOffset",
    "OrderBy",
    "QueryDescriptor",
    "SortOrder",
    "StatementFilter",
    "TimestampMixin",
    "Where",
]
