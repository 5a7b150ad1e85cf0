"""Chain hash value type and its column mapping.

Types included:
- Hash: Fixed-width byte string rendered as ``0x``-prefixed lowercase hex
- HashType: ``bytea`` column that round-trips ``Hash`` values
"""

from __future__ import annotations

from functools import total_ordering
from typing import TYPE_CHECKING, Any

from sqlalchemy import LargeBinary, TypeDecorator

from explorer_service.core.exceptions import InvalidArgumentException

if TYPE_CHECKING:
    from sqlalchemy.engine import Dialect

ADDRESS_BYTES = 20
FULL_BYTES = 32


@total_ordering
class Hash:
    """Immutable fixed-width hash.

    Address hashes are 20 bytes, block and transaction hashes are 32 bytes.
    Two hashes are equal when their bytes are equal.

    Example:
        >>> Hash.address("0x" + "ab" * 20).byte_count
        20
        >>> str(Hash.full(b"\\x00" * 32))
        '0x0000000000000000000000000000000000000000000000000000000000000000'
    """

    __slots__ = ("_bytes",)

    def __init__(self, value: bytes, byte_count: int) -> None:
        if len(value) != byte_count:
            raise InvalidArgumentException(
                f"Expected a {byte_count}-byte hash, got {len(value)} bytes.",
                extra={"byte_count": byte_count},
            )
        self._bytes = bytes(value)

    @classmethod
    def cast(cls, value: Hash | bytes | str, byte_count: int) -> Hash:
        """Coerce raw bytes, ``0x`` hex or an existing hash into a ``Hash``."""
        if isinstance(value, Hash):
            return cls(value.bytes, byte_count)
        if isinstance(value, bytes | bytearray | memoryview):
            return cls(bytes(value), byte_count)
        if isinstance(value, str):
            return cls(_decode_hex(value), byte_count)
        raise InvalidArgumentException(f"Cannot interpret {type(value).__name__} as a hash.")

    @classmethod
    def address(cls, value: Hash | bytes | str) -> Hash:
        return cls.cast(value, ADDRESS_BYTES)

    @classmethod
    def full(cls, value: Hash | bytes | str) -> Hash:
        return cls.cast(value, FULL_BYTES)

    @property
    def bytes(self) -> bytes:
        return self._bytes

    @property
    def byte_count(self) -> int:
        return len(self._bytes)

    def __str__(self) -> str:
        return "0x" + self._bytes.hex()

    def __repr__(self) -> str:
        return f"Hash({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Hash):
            return self._bytes == other._bytes
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, Hash):
            return self._bytes < other._bytes
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._bytes)


def _decode_hex(value: str) -> bytes:
    if not value.startswith(("0x", "0X")):
        raise InvalidArgumentException("Hashes must be 0x-prefixed hex strings.")
    try:
        return bytes.fromhex(value[2:])
    except ValueError as e:
        raise InvalidArgumentException(f"Invalid hex in hash: {value!r}.") from e


class HashType(TypeDecorator[Hash]):
    """Fixed-width hash stored as ``bytea``.

    Binds ``Hash``, raw bytes or ``0x`` hex strings and always loads ``Hash``
    instances, so comparisons such as ``Transaction.hash == "0x..."`` work.

    Example:
        class Address(Base):
            __tablename__ = "addresses"
            hash: Mapped[Hash] = mapped_column(HashType(ADDRESS_BYTES), primary_key=True)
    """

    impl = LargeBinary
    cache_ok = True

    def __init__(self, byte_count: int, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.byte_count = byte_count

    def process_bind_param(self, value: Any, dialect: Dialect) -> bytes | None:
        _ = dialect
        if value is None:
            return None
        return Hash.cast(value, self.byte_count).bytes

    def process_result_value(self, value: Any, dialect: Dialect) -> Hash | None:
        _ = dialect
        if value is None:
            return None
        return Hash(bytes(value), self.byte_count)


__all__ = ["ADDRESS_BYTES", "FULL_BYTES", "Hash", "HashType"]
