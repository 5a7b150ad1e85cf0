"""Named query descriptors for chain collections and lookups.

Every function here returns a ``QueryDescriptor`` (or ``AggregateDescriptor``)
and never touches the database. Each collection ordering is total: the
trailing columns break ties so keyset cursors address exactly one row.
"""

from __future__ import annotations

from sqlalchemy import exists, func, or_, select
from sqlalchemy.orm import aliased

from explorer_service.core.database import AggregateDescriptor, Hash, Join, QueryDescriptor
from explorer_service.features.chain.models import (
    Address,
    Block,
    InternalTransaction,
    PendingBlockOperation,
    TokenTransfer,
    Transaction,
)


def page_offset(page_number: int, page_size: int) -> int:
    """Row offset for a 1-based page number. Pages below 1 clamp to 1."""
    return (max(page_number, 1) - 1) * page_size


# ---------------------------------------------------------------------------
# Connections (keyset pagination)
# ---------------------------------------------------------------------------


def transactions_for_address(address_hash: Hash) -> QueryDescriptor[Transaction]:
    """Transactions sent, received or creating a contract at ``address_hash``."""
    return QueryDescriptor(
        model=Transaction,
        where=(
            or_(
                Transaction.to_address_hash == address_hash,
                Transaction.from_address_hash == address_hash,
                Transaction.created_contract_address_hash == address_hash,
            ),
        ),
        order_by=(
            (Transaction.block_number, "desc"),
            (Transaction.index, "desc"),
            (Transaction.hash, "desc"),
        ),
    )


def token_transfers_for_contract(contract_hash: Hash) -> QueryDescriptor[TokenTransfer]:
    """Transfers of the token at ``contract_hash`` with a collated transaction."""
    return QueryDescriptor(
        model=TokenTransfer,
        joins=(Join(Transaction, TokenTransfer.transaction_hash == Transaction.hash),),
        where=(TokenTransfer.token_contract_address_hash == contract_hash,),
        order_by=(
            (TokenTransfer.block_number, "desc"),
            (TokenTransfer.log_index, "desc"),
            (TokenTransfer.transaction_hash, "desc"),
        ),
    )


def internal_transactions_for_transaction(
    transaction_hash: Hash,
) -> QueryDescriptor[InternalTransaction]:
    """Finalized internal transactions of a transaction, in trace order."""
    return QueryDescriptor(
        model=InternalTransaction,
        joins=(_owning_transaction(),),
        where=(
            InternalTransaction.transaction_hash == transaction_hash,
            *_visible_internal_transaction(),
        ),
        order_by=((InternalTransaction.index, "asc"),),
    )


# ---------------------------------------------------------------------------
# Offset pages
# ---------------------------------------------------------------------------


def wealthy_addresses(page_number: int, page_size: int) -> QueryDescriptor[Address]:
    return QueryDescriptor(
        model=Address,
        where=(Address.fetched_coin_balance > 0,),
        order_by=((Address.fetched_coin_balance, "desc"), (Address.hash, "asc")),
    ).with_page(limit=page_size, offset=page_offset(page_number, page_size))


def block_list(page_number: int, page_size: int) -> QueryDescriptor[Block]:
    return QueryDescriptor(
        model=Block,
        order_by=((Block.timestamp, "desc"), (Block.number, "desc"), (Block.hash, "asc")),
    ).with_page(limit=page_size, offset=page_offset(page_number, page_size))


def transaction_list(page_number: int, page_size: int) -> QueryDescriptor[Transaction]:
    return QueryDescriptor(
        model=Transaction,
        order_by=((Transaction.inserted_at, "desc"), (Transaction.hash, "asc")),
    ).with_page(limit=page_size, offset=page_offset(page_number, page_size))


# ---------------------------------------------------------------------------
# Lookups and aggregates
# ---------------------------------------------------------------------------


def block_by_number(number: int) -> QueryDescriptor[Block]:
    """Consensus block at height ``number``."""
    return QueryDescriptor(
        model=Block,
        where=(Block.number == number, Block.consensus.is_(True)),
    )


def address_by_hash(address_hash: Hash) -> QueryDescriptor[Address]:
    return QueryDescriptor(model=Address, where=(Address.hash == address_hash,))


def transaction_by_hash(transaction_hash: Hash) -> QueryDescriptor[Transaction]:
    return QueryDescriptor(model=Transaction, where=(Transaction.hash == transaction_hash,))


def internal_transaction_by_key(
    transaction_hash: Hash, index: int
) -> QueryDescriptor[InternalTransaction]:
    """Same visibility rules as ``internal_transactions_for_transaction``."""
    return QueryDescriptor(
        model=InternalTransaction,
        joins=(_owning_transaction(),),
        where=(
            InternalTransaction.transaction_hash == transaction_hash,
            InternalTransaction.index == index,
            *_visible_internal_transaction(),
        ),
    )


def token_transfer_by_key(transaction_hash: Hash, log_index: int) -> QueryDescriptor[TokenTransfer]:
    return QueryDescriptor(
        model=TokenTransfer,
        where=(
            TokenTransfer.transaction_hash == transaction_hash,
            TokenTransfer.log_index == log_index,
        ),
    )


def total_transaction_count() -> AggregateDescriptor:
    return AggregateDescriptor(model=Transaction, expression=func.count())


# ---------------------------------------------------------------------------
# Shared fragments
# ---------------------------------------------------------------------------


def _owning_transaction() -> Join:
    return Join(Transaction, InternalTransaction.transaction_hash == Transaction.hash)


def _visible_internal_transaction() -> tuple:
    """Owning block is finalized and the owner traced more than one call.

    A transaction with a single internal transaction only carries the
    top-level call, which duplicates the transaction itself.
    """
    sibling = aliased(InternalTransaction)
    sibling_count = (
        select(func.count())
        .select_from(sibling)
        .where(sibling.transaction_hash == InternalTransaction.transaction_hash)
        .correlate(InternalTransaction)
        .scalar_subquery()
    )
    block_pending = exists().where(PendingBlockOperation.block_hash == Transaction.block_hash)
    return (~block_pending, sibling_count > 1)


__all__ = [
    "address_by_hash",
    "block_by_number",
    "block_list",
    "internal_transaction_by_key",
    "internal_transactions_for_transaction",
    "page_offset",
    "token_transfer_by_key",
    "token_transfers_for_contract",
    "total_transaction_count",
    "transaction_by_hash",
    "transaction_list",
    "transactions_for_address",
]
