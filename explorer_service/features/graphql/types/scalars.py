"""Custom GraphQL scalars.

Provides custom scalar types for:
- AddressHash: 20-byte address hash as 0x-prefixed hex
- FullHash: 32-byte block or transaction hash as 0x-prefixed hex
- Data: arbitrary bytes as 0x-prefixed hex (output only)

Parsing a hash of the wrong length raises ``InvalidArgumentException``, which
surfaces as a ``VALIDATION_ERROR``.
"""

from __future__ import annotations

from typing import NewType

import strawberry

from explorer_service.core.database.types import Hash


def _serialize_data(value: bytes) -> str:
    return "0x" + bytes(value).hex()


AddressHash = strawberry.scalar(
    NewType("AddressHash", Hash),
    name="AddressHash",
    description="A 20-byte address hash, serialized as 0x-prefixed hex",
    serialize=str,
    parse_value=Hash.address,
)

FullHash = strawberry.scalar(
    NewType("FullHash", Hash),
    name="FullHash",
    description="A 32-byte block or transaction hash, serialized as 0x-prefixed hex",
    serialize=str,
    parse_value=Hash.full,
)

Data = strawberry.scalar(
    NewType("Data", bytes),
    name="Data",
    description="Raw bytes, serialized as 0x-prefixed hex",
    serialize=_serialize_data,
)

__all__ = ["AddressHash", "Data", "FullHash"]
