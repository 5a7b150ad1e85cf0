"""GraphQL types for indexed chain data.

Each type is built from its ORM row with ``from_model``. Nested connections
(``Address.transactions``, ``Transaction.internalTransactions``) open their
own session from the request context.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

import strawberry
from strawberry.types import Info

from explorer_service.core.pagination import ConnectionArgs
from explorer_service.features.chain.repository import (
    get_internal_transaction_repository,
    get_transaction_repository,
)
from explorer_service.features.graphql.context import GraphQLContext
from explorer_service.features.graphql.types.base import (
    AfterArg,
    BeforeArg,
    CountArg,
    FirstArg,
    LastArg,
    PageInfoType,
)
from explorer_service.features.graphql.types.scalars import AddressHash, Data, FullHash

if TYPE_CHECKING:
    from explorer_service.core.pagination import Connection
    from explorer_service.features.chain.models import (
        Address,
        Block,
        InternalTransaction,
        TokenTransfer,
        Transaction,
    )


@strawberry.enum(description="Transaction execution status")
class TransactionStatus(Enum):
    OK = "OK"
    ERROR = "ERROR"

    @classmethod
    def from_code(cls, status: int | None) -> TransactionStatus | None:
        if status is None:
            return None
        return cls.OK if status == 1 else cls.ERROR


# ============================================================================
# Blocks and addresses
# ============================================================================


@strawberry.type(name="Block", description="A block")
class BlockType:
    hash: FullHash
    number: int
    parent_hash: FullHash
    miner_hash: AddressHash
    consensus: bool
    difficulty: Decimal | None
    total_difficulty: Decimal | None
    gas_limit: Decimal
    gas_used: Decimal
    size: int | None
    timestamp: datetime

    @classmethod
    def from_model(cls, block: Block) -> BlockType:
        return cls(
            hash=block.hash,
            number=block.number,
            parent_hash=block.parent_hash,
            miner_hash=block.miner_hash,
            consensus=block.consensus,
            difficulty=block.difficulty,
            total_difficulty=block.total_difficulty,
            gas_limit=block.gas_limit,
            gas_used=block.gas_used,
            size=block.size,
            timestamp=block.timestamp,
        )


@strawberry.type(name="Address", description="An account or contract address")
class AddressType:
    hash: AddressHash
    fetched_coin_balance: Decimal | None
    fetched_coin_balance_block_number: int | None
    contract_code: Data | None

    @classmethod
    def from_model(cls, address: Address) -> AddressType:
        return cls(
            hash=address.hash,
            fetched_coin_balance=address.fetched_coin_balance,
            fetched_coin_balance_block_number=address.fetched_coin_balance_block_number,
            contract_code=address.contract_code,
        )

    @strawberry.field(description="Transactions from, to or creating this address, newest first")
    async def transactions(
        self,
        info: Info[GraphQLContext, None],
        first: FirstArg = None,
        after: AfterArg = None,
        last: LastArg = None,
        before: BeforeArg = None,
        count: CountArg = None,
    ) -> TransactionConnection:
        args = ConnectionArgs(first=first, after=after, last=last, before=before, count=count)
        repo = get_transaction_repository()
        async with info.context.session_factory() as session:
            connection = await repo.transactions_for_address(session, self.hash, args)
        return TransactionConnection.from_connection(connection)


# ============================================================================
# Transactions
# ============================================================================


@strawberry.type(name="Transaction", description="A collated transaction")
class TransactionType:
    hash: FullHash
    block_hash: FullHash
    block_number: int
    index: int
    from_address_hash: AddressHash
    to_address_hash: AddressHash | None
    created_contract_address_hash: AddressHash | None
    value: Decimal
    gas: Decimal
    gas_price: Decimal | None
    gas_used: Decimal | None
    cumulative_gas_used: Decimal | None
    nonce: int
    input: Data
    status: TransactionStatus | None
    error: str | None

    @classmethod
    def from_model(cls, transaction: Transaction) -> TransactionType:
        return cls(
            hash=transaction.hash,
            block_hash=transaction.block_hash,
            block_number=transaction.block_number,
            index=transaction.index,
            from_address_hash=transaction.from_address_hash,
            to_address_hash=transaction.to_address_hash,
            created_contract_address_hash=transaction.created_contract_address_hash,
            value=transaction.value,
            gas=transaction.gas,
            gas_price=transaction.gas_price,
            gas_used=transaction.gas_used,
            cumulative_gas_used=transaction.cumulative_gas_used,
            nonce=transaction.nonce,
            input=transaction.input,
            status=TransactionStatus.from_code(transaction.status),
            error=transaction.error,
        )

    @strawberry.field(description="Finalized internal transactions, in trace order")
    async def internal_transactions(
        self,
        info: Info[GraphQLContext, None],
        first: FirstArg = None,
        after: AfterArg = None,
        last: LastArg = None,
        before: BeforeArg = None,
        count: CountArg = None,
    ) -> InternalTransactionConnection:
        args = ConnectionArgs(first=first, after=after, last=last, before=before, count=count)
        repo = get_internal_transaction_repository()
        async with info.context.session_factory() as session:
            connection = await repo.internal_transactions_for_transaction(session, self.hash, args)
        return InternalTransactionConnection.from_connection(connection)


@strawberry.type(name="TransactionEdge")
class TransactionEdge:
    cursor: str
    node: TransactionType


@strawberry.type(name="TransactionConnection")
class TransactionConnection:
    edges: list[TransactionEdge]
    page_info: PageInfoType

    @classmethod
    def from_connection(cls, connection: Connection[Transaction]) -> TransactionConnection:
        return cls(
            edges=[
                TransactionEdge(cursor=edge.cursor, node=TransactionType.from_model(edge.node))
                for edge in connection.edges
            ],
            page_info=PageInfoType.from_page_info(connection.page_info),
        )


# ============================================================================
# Internal transactions
# ============================================================================


@strawberry.type(name="InternalTransaction", description="A call traced inside a transaction")
class InternalTransactionType:
    transaction_hash: FullHash
    index: int
    block_number: int
    transaction_index: int
    type: str
    call_type: str | None
    from_address_hash: AddressHash
    to_address_hash: AddressHash | None
    created_contract_address_hash: AddressHash | None
    value: Decimal
    gas: Decimal | None
    gas_used: Decimal | None
    input: Data | None
    output: Data | None
    error: str | None

    @classmethod
    def from_model(cls, internal: InternalTransaction) -> InternalTransactionType:
        return cls(
            transaction_hash=internal.transaction_hash,
            index=internal.index,
            block_number=internal.block_number,
            transaction_index=internal.transaction_index,
            type=internal.type,
            call_type=internal.call_type,
            from_address_hash=internal.from_address_hash,
            to_address_hash=internal.to_address_hash,
            created_contract_address_hash=internal.created_contract_address_hash,
            value=internal.value,
            gas=internal.gas,
            gas_used=internal.gas_used,
            input=internal.input,
            output=internal.output,
            error=internal.error,
        )


@strawberry.type(name="InternalTransactionEdge")
class InternalTransactionEdge:
    cursor: str
    node: InternalTransactionType


@strawberry.type(name="InternalTransactionConnection")
class InternalTransactionConnection:
    edges: list[InternalTransactionEdge]
    page_info: PageInfoType

    @classmethod
    def from_connection(
        cls, connection: Connection[InternalTransaction]
    ) -> InternalTransactionConnection:
        return cls(
            edges=[
                InternalTransactionEdge(
                    cursor=edge.cursor, node=InternalTransactionType.from_model(edge.node)
                )
                for edge in connection.edges
            ],
            page_info=PageInfoType.from_page_info(connection.page_info),
        )


# ============================================================================
# Token transfers
# ============================================================================


@strawberry.type(name="TokenTransfer", description="A token transfer event")
class TokenTransferType:
    transaction_hash: FullHash
    log_index: int
    block_number: int
    block_hash: FullHash
    from_address_hash: AddressHash
    to_address_hash: AddressHash
    token_contract_address_hash: AddressHash
    amount: Decimal | None
    token_id: Decimal | None

    @classmethod
    def from_model(cls, transfer: TokenTransfer) -> TokenTransferType:
        return cls(
            transaction_hash=transfer.transaction_hash,
            log_index=transfer.log_index,
            block_number=transfer.block_number,
            block_hash=transfer.block_hash,
            from_address_hash=transfer.from_address_hash,
            to_address_hash=transfer.to_address_hash,
            token_contract_address_hash=transfer.token_contract_address_hash,
            amount=transfer.amount,
            token_id=transfer.token_id,
        )


@strawberry.type(name="TokenTransferEdge")
class TokenTransferEdge:
    cursor: str
    node: TokenTransferType


@strawberry.type(name="TokenTransferConnection")
class TokenTransferConnection:
    edges: list[TokenTransferEdge]
    page_info: PageInfoType

    @classmethod
    def from_connection(cls, connection: Connection[TokenTransfer]) -> TokenTransferConnection:
        return cls(
            edges=[
                TokenTransferEdge(cursor=edge.cursor, node=TokenTransferType.from_model(edge.node))
                for edge in connection.edges
            ],
            page_info=PageInfoType.from_page_info(connection.page_info),
        )


__all__ = [
    "AddressType",
    "BlockType",
    "InternalTransactionConnection",
    "InternalTransactionEdge",
    "InternalTransactionType",
    "TokenTransferConnection",
    "TokenTransferEdge",
    "TokenTransferType",
    "TransactionConnection",
    "TransactionEdge",
    "TransactionStatus",
    "TransactionType",
]
