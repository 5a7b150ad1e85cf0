"""SQLAlchemy models for the indexed chain data.

The explorer only reads these tables; an indexer owns the writes. Hashes are
stored as ``bytea`` and surface as ``Hash`` values. Wei amounts are
``numeric(100, 0)`` and surface as ``Decimal``.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from explorer_service.core.database import (
    ADDRESS_BYTES,
    FULL_BYTES,
    Base,
    Hash,
    HashType,
    TimestampMixin,
)

Wei = Numeric(100, 0)


class Block(Base, TimestampMixin):
    """A block, consensus or uncle.

    Several blocks can share a ``number`` during a reorg; only one of them has
    ``consensus`` set.
    """

    __tablename__ = "blocks"

    hash: Mapped[Hash] = mapped_column(HashType(FULL_BYTES), primary_key=True)
    number: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    parent_hash: Mapped[Hash] = mapped_column(HashType(FULL_BYTES), nullable=False)
    miner_hash: Mapped[Hash] = mapped_column(HashType(ADDRESS_BYTES), nullable=False)
    consensus: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    difficulty: Mapped[Decimal | None] = mapped_column(Numeric(50, 0), nullable=True)
    total_difficulty: Mapped[Decimal | None] = mapped_column(Numeric(50, 0), nullable=True)
    gas_limit: Mapped[Decimal] = mapped_column(Wei, nullable=False)
    gas_used: Mapped[Decimal] = mapped_column(Wei, nullable=False)
    size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Block(number={self.number}, hash={self.hash})>"


class PendingBlockOperation(Base, TimestampMixin):
    """Marks a block whose internal transactions are not yet finalized.

    A block is pending while it has a row here.
    """

    __tablename__ = "pending_block_operations"

    block_hash: Mapped[Hash] = mapped_column(
        HashType(FULL_BYTES),
        ForeignKey("blocks.hash", ondelete="CASCADE"),
        primary_key=True,
    )
    block_number: Mapped[int | None] = mapped_column(BigInteger, nullable=True)


class Address(Base, TimestampMixin):
    """An account or contract address."""

    __tablename__ = "addresses"

    hash: Mapped[Hash] = mapped_column(HashType(ADDRESS_BYTES), primary_key=True)
    fetched_coin_balance: Mapped[Decimal | None] = mapped_column(Wei, nullable=True, index=True)
    fetched_coin_balance_block_number: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    contract_code: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    nonce: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<Address(hash={self.hash})>"


class Transaction(Base, TimestampMixin):
    """A collated transaction.

    ``(block_number, index, hash)`` is the transaction's position on chain and
    its pagination key.
    """

    __tablename__ = "transactions"
    __table_args__ = (
        UniqueConstraint("block_hash", "index", name="uq_transactions_block_hash_index"),
        Index("ix_transactions_block_number_index", "block_number", "index"),
    )

    hash: Mapped[Hash] = mapped_column(HashType(FULL_BYTES), primary_key=True)
    block_hash: Mapped[Hash] = mapped_column(
        HashType(FULL_BYTES),
        ForeignKey("blocks.hash", ondelete="CASCADE"),
        nullable=False,
    )
    block_number: Mapped[int] = mapped_column(BigInteger, nullable=False)
    index: Mapped[int] = mapped_column(Integer, nullable=False)
    from_address_hash: Mapped[Hash] = mapped_column(
        HashType(ADDRESS_BYTES), nullable=False, index=True
    )
    to_address_hash: Mapped[Hash | None] = mapped_column(
        HashType(ADDRESS_BYTES), nullable=True, index=True
    )
    created_contract_address_hash: Mapped[Hash | None] = mapped_column(
        HashType(ADDRESS_BYTES), nullable=True, index=True
    )
    value: Mapped[Decimal] = mapped_column(Wei, nullable=False)
    gas: Mapped[Decimal] = mapped_column(Wei, nullable=False)
    gas_price: Mapped[Decimal | None] = mapped_column(Wei, nullable=True)
    gas_used: Mapped[Decimal | None] = mapped_column(Wei, nullable=True)
    cumulative_gas_used: Mapped[Decimal | None] = mapped_column(Wei, nullable=True)
    nonce: Mapped[int] = mapped_column(Integer, nullable=False)
    input: Mapped[bytes] = mapped_column(LargeBinary, nullable=False, default=b"")
    status: Mapped[int | None] = mapped_column(Integer, nullable=True)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Transaction(hash={self.hash}, block_number={self.block_number}, index={self.index})>"


class InternalTransaction(Base, TimestampMixin):
    """A call, create or selfdestruct traced inside a transaction."""

    __tablename__ = "internal_transactions"

    transaction_hash: Mapped[Hash] = mapped_column(
        HashType(FULL_BYTES),
        ForeignKey("transactions.hash", ondelete="CASCADE"),
        primary_key=True,
    )
    index: Mapped[int] = mapped_column(Integer, primary_key=True)
    block_number: Mapped[int] = mapped_column(BigInteger, nullable=False)
    transaction_index: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    call_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    from_address_hash: Mapped[Hash] = mapped_column(HashType(ADDRESS_BYTES), nullable=False)
    to_address_hash: Mapped[Hash | None] = mapped_column(HashType(ADDRESS_BYTES), nullable=True)
    created_contract_address_hash: Mapped[Hash | None] = mapped_column(
        HashType(ADDRESS_BYTES), nullable=True
    )
    value: Mapped[Decimal] = mapped_column(Wei, nullable=False)
    gas: Mapped[Decimal | None] = mapped_column(Wei, nullable=True)
    gas_used: Mapped[Decimal | None] = mapped_column(Wei, nullable=True)
    input: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    output: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<InternalTransaction(transaction_hash={self.transaction_hash}, index={self.index})>"


class TokenTransfer(Base, TimestampMixin):
    """A token transfer event log emitted by a transaction."""

    __tablename__ = "token_transfers"

    transaction_hash: Mapped[Hash] = mapped_column(
        HashType(FULL_BYTES),
        ForeignKey("transactions.hash", ondelete="CASCADE"),
        primary_key=True,
    )
    log_index: Mapped[int] = mapped_column(Integer, primary_key=True)
    block_number: Mapped[int] = mapped_column(BigInteger, nullable=False)
    block_hash: Mapped[Hash] = mapped_column(HashType(FULL_BYTES), nullable=False)
    from_address_hash: Mapped[Hash] = mapped_column(HashType(ADDRESS_BYTES), nullable=False)
    to_address_hash: Mapped[Hash] = mapped_column(HashType(ADDRESS_BYTES), nullable=False)
    token_contract_address_hash: Mapped[Hash] = mapped_column(
        HashType(ADDRESS_BYTES), nullable=False, index=True
    )
    amount: Mapped[Decimal | None] = mapped_column(Wei, nullable=True)
    token_id: Mapped[Decimal | None] = mapped_column(Numeric(78, 0), nullable=True)

    def __repr__(self) -> str:
        return f"<TokenTransfer(transaction_hash={self.transaction_hash}, log_index={self.log_index})>"


__all__ = [
    "Address",
    "Block",
    "InternalTransaction",
    "PendingBlockOperation",
    "TokenTransfer",
    "Transaction",
]
