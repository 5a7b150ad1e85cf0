"""Query resolvers for chain data.

Provides read operations:
- block(number), blocks(pageNumber, pageSize)
- address(hash), wealthyAddresses(pageNumber, pageSize)
- transaction(hash), transactions(pageNumber, pageSize), totalTransactionCount
- internalTransaction(transactionHash, index)
- tokenTransfer(transactionHash, logIndex), tokenTransfers(tokenContractAddressHash, ...)

Every resolver opens its own session. Repository exceptions propagate and
are turned into coded GraphQL errors by the schema extensions.
"""

from __future__ import annotations

import logging
from typing import Annotated

import strawberry
from strawberry.types import Info

from explorer_service.core.pagination import ConnectionArgs
from explorer_service.features.chain.repository import (
    get_address_repository,
    get_block_repository,
    get_internal_transaction_repository,
    get_token_transfer_repository,
    get_transaction_repository,
)
from explorer_service.features.graphql.context import GraphQLContext
from explorer_service.features.graphql.types.base import (
    AfterArg,
    BeforeArg,
    CountArg,
    FirstArg,
    LastArg,
    PageNumberArg,
    PageSizeArg,
)
from explorer_service.features.graphql.types.chain import (
    AddressType,
    BlockType,
    InternalTransactionType,
    TokenTransferConnection,
    TokenTransferType,
    TransactionType,
)
from explorer_service.features.graphql.types.scalars import AddressHash, FullHash

logger = logging.getLogger(__name__)

AddressHashArg = Annotated[AddressHash, strawberry.argument(description="Address hash")]
FullHashArg = Annotated[FullHash, strawberry.argument(description="Transaction hash")]


async def block_query(
    info: Info[GraphQLContext, None],
    number: Annotated[int, strawberry.argument(description="Block height")],
) -> BlockType:
    repo = get_block_repository()
    async with info.context.session_factory() as session:
        block = await repo.get_block(session, number)
    return BlockType.from_model(block)


async def blocks_query(
    info: Info[GraphQLContext, None],
    page_number: PageNumberArg = 1,
    page_size: PageSizeArg = None,
) -> list[BlockType]:
    """Blocks, newest first."""
    repo = get_block_repository()
    async with info.context.session_factory() as session:
        blocks = await repo.list_blocks(session, page_number=page_number, page_size=page_size)
    return [BlockType.from_model(block) for block in blocks]


async def address_query(info: Info[GraphQLContext, None], hash: AddressHashArg) -> AddressType:  # noqa: A002
    repo = get_address_repository()
    async with info.context.session_factory() as session:
        address = await repo.get_address(session, hash)
    return AddressType.from_model(address)


async def wealthy_addresses_query(
    info: Info[GraphQLContext, None],
    page_number: PageNumberArg = 1,
    page_size: PageSizeArg = None,
) -> list[AddressType]:
    """Addresses with a positive balance, richest first."""
    repo = get_address_repository()
    async with info.context.session_factory() as session:
        addresses = await repo.list_wealthy_addresses(
            session, page_number=page_number, page_size=page_size
        )
    return [AddressType.from_model(address) for address in addresses]


async def transaction_query(info: Info[GraphQLContext, None], hash: FullHashArg) -> TransactionType:  # noqa: A002
    repo = get_transaction_repository()
    async with info.context.session_factory() as session:
        transaction = await repo.get_transaction(session, hash)
    return TransactionType.from_model(transaction)


async def transactions_query(
    info: Info[GraphQLContext, None],
    page_number: PageNumberArg = 1,
    page_size: PageSizeArg = None,
) -> list[TransactionType]:
    """Transactions by insertion time, newest first."""
    repo = get_transaction_repository()
    async with info.context.session_factory() as session:
        transactions = await repo.list_transactions(
            session, page_number=page_number, page_size=page_size
        )
    return [TransactionType.from_model(transaction) for transaction in transactions]


async def total_transaction_count_query(info: Info[GraphQLContext, None]) -> int:
    repo = get_transaction_repository()
    async with info.context.session_factory() as session:
        return await repo.total_transaction_count(session)


async def internal_transaction_query(
    info: Info[GraphQLContext, None],
    transaction_hash: FullHashArg,
    index: Annotated[int, strawberry.argument(description="Position in the call trace")],
) -> InternalTransactionType:
    repo = get_internal_transaction_repository()
    async with info.context.session_factory() as session:
        internal = await repo.get_internal_transaction(session, transaction_hash, index)
    return InternalTransactionType.from_model(internal)


async def token_transfer_query(
    info: Info[GraphQLContext, None],
    transaction_hash: FullHashArg,
    log_index: Annotated[int, strawberry.argument(description="Log index within the block")],
) -> TokenTransferType:
    repo = get_token_transfer_repository()
    async with info.context.session_factory() as session:
        transfer = await repo.get_token_transfer(session, transaction_hash, log_index)
    return TokenTransferType.from_model(transfer)


async def token_transfers_query(
    info: Info[GraphQLContext, None],
    token_contract_address_hash: AddressHashArg,
    first: FirstArg = None,
    after: AfterArg = None,
    last: LastArg = None,
    before: BeforeArg = None,
    count: CountArg = None,
) -> TokenTransferConnection:
    """Transfers of one token, newest block first."""
    args = ConnectionArgs(first=first, after=after, last=last, before=before, count=count)
    repo = get_token_transfer_repository()
    async with info.context.session_factory() as session:
        connection = await repo.token_transfers_for_contract(
            session, token_contract_address_hash, args
        )
    return TokenTransferConnection.from_connection(connection)


__all__ = [
    "address_query",
    "block_query",
    "blocks_query",
    "internal_transaction_query",
    "token_transfer_query",
    "token_transfers_query",
    "total_transaction_count_query",
    "transaction_query",
    "transactions_query",
    "wealthy_addresses_query",
]
