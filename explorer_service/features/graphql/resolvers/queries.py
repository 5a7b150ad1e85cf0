"""Root query type for the GraphQL API.

Fields delegate to the resolver functions in ``chain_queries``; argument
names are camel-cased by Strawberry (``pageNumber``, ``logIndex``, ...).
"""

from __future__ import annotations

import strawberry

from explorer_service.features.graphql.resolvers.chain_queries import (
    address_query,
    block_query,
    blocks_query,
    internal_transaction_query,
    token_transfer_query,
    token_transfers_query,
    total_transaction_count_query,
    transaction_query,
    transactions_query,
    wealthy_addresses_query,
)


@strawberry.type(description="Root query type")
class Query:
    """GraphQL Query resolvers."""

    block = strawberry.field(resolver=block_query, description="Consensus block by number")
    blocks = strawberry.field(resolver=blocks_query, description="Blocks, newest first")

    address = strawberry.field(resolver=address_query, description="Address by hash")
    wealthy_addresses = strawberry.field(
        resolver=wealthy_addresses_query,
        description="Addresses holding a positive coin balance, richest first",
    )

    transaction = strawberry.field(resolver=transaction_query, description="Transaction by hash")
    transactions = strawberry.field(
        resolver=transactions_query, description="Transactions, most recently indexed first"
    )
    total_transaction_count = strawberry.field(
        resolver=total_transaction_count_query, description="Number of indexed transactions"
    )

    internal_transaction = strawberry.field(
        resolver=internal_transaction_query,
        description="Internal transaction by transaction hash and index",
    )

    token_transfer = strawberry.field(
        resolver=token_transfer_query,
        description="Token transfer by transaction hash and log index",
    )
    token_transfers = strawberry.field(
        resolver=token_transfers_query,
        description="Transfers of a token contract, newest block first",
    )


__all__ = ["Query"]
