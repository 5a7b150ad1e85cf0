"""Repositories for the chain feature.

Each repository resolves one entity kind: lookups by natural key, keyset
connections and offset pages. Lookups raise ``NotFoundException`` with the
public message for that kind. Hash arguments accept ``Hash`` values, raw bytes
or ``0x`` hex; a hash of the wrong length raises ``InvalidArgumentException``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from explorer_service.core.database import BaseRepository, Hash
from explorer_service.core.exceptions import InvalidArgumentException, NotFoundException
from explorer_service.core.settings import get_pagination_settings
from explorer_service.features.chain import queries
from explorer_service.features.chain.models import (
    Address,
    Block,
    InternalTransaction,
    TokenTransfer,
    Transaction,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from explorer_service.core.database import QueryDescriptor
    from explorer_service.core.pagination import Connection, ConnectionArgs
    from explorer_service.core.settings.pagination import PaginationSettings

HashInput = Hash | bytes | str


class _ChainRepository[T](BaseRepository[T]):
    """Shared page-size policy for chain repositories."""

    __slots__ = ("_pagination",)

    def __init__(self, model: type[T], pagination: PaginationSettings | None = None) -> None:
        super().__init__(model)
        self._pagination = pagination or get_pagination_settings()

    def _offset_page_size(self, page_size: int | None) -> int:
        if page_size is None:
            return self._pagination.default_limit
        if page_size < 0:
            raise InvalidArgumentException(
                "`pageSize` must be a non-negative integer.",
                extra={"page_size": page_size},
            )
        return min(page_size, self._pagination.max_limit)

    async def _connection(
        self,
        session: AsyncSession,
        descriptor: QueryDescriptor[T],
        args: ConnectionArgs,
    ) -> Connection[T]:
        return await self.paginate_cursor(
            session,
            descriptor,
            args,
            default_size=self._pagination.cursor_page_size,
            max_size=self._pagination.max_cursor_page_size,
        )

    def _not_found(self, detail: str, type: str, **extra: object) -> NotFoundException:
        self._logger.info(
            "Entity not found",
            extra={"entity": self.model.__name__, "operation": "db.lookup", **extra},
        )
        return NotFoundException(detail, type=type, extra=extra)


class BlockRepository(_ChainRepository[Block]):
    def __init__(self, pagination: PaginationSettings | None = None) -> None:
        super().__init__(Block, pagination)

    async def get_block(self, session: AsyncSession, number: int) -> Block:
        """Consensus block at ``number``.

        Raises:
            NotFoundException: If no consensus block has that number.
        """
        block = await self.get_one(session, queries.block_by_number(number))
        if block is None:
            raise self._not_found(
                f"Block number {number} was not found.", "block-not-found", number=number
            )
        return block

    async def list_blocks(
        self, session: AsyncSession, *, page_number: int = 1, page_size: int | None = None
    ) -> Sequence[Block]:
        size = self._offset_page_size(page_size)
        return await self.list_page(session, queries.block_list(page_number, size))


class AddressRepository(_ChainRepository[Address]):
    def __init__(self, pagination: PaginationSettings | None = None) -> None:
        super().__init__(Address, pagination)

    async def get_address(self, session: AsyncSession, address_hash: HashInput) -> Address:
        """Address row for ``address_hash``.

        Raises:
            InvalidArgumentException: If the hash is not 20 bytes.
            NotFoundException: If the address was never indexed.
        """
        key = Hash.address(address_hash)
        address = await self.get_one(session, queries.address_by_hash(key))
        if address is None:
            raise self._not_found("Address not found.", "address-not-found", hash=str(key))
        return address

    async def list_wealthy_addresses(
        self, session: AsyncSession, *, page_number: int = 1, page_size: int | None = None
    ) -> Sequence[Address]:
        """Addresses with a positive balance, richest first."""
        size = self._offset_page_size(page_size)
        return await self.list_page(session, queries.wealthy_addresses(page_number, size))


class TransactionRepository(_ChainRepository[Transaction]):
    def __init__(self, pagination: PaginationSettings | None = None) -> None:
        super().__init__(Transaction, pagination)

    async def get_transaction(self, session: AsyncSession, transaction_hash: HashInput) -> Transaction:
        """Transaction by hash.

        Raises:
            InvalidArgumentException: If the hash is not 32 bytes.
            NotFoundException: ``"Transaction not found."``
        """
        key = Hash.full(transaction_hash)
        transaction = await self.get_one(session, queries.transaction_by_hash(key))
        if transaction is None:
            raise self._not_found("Transaction not found.", "transaction-not-found", hash=str(key))
        return transaction

    async def transactions_for_address(
        self, session: AsyncSession, address_hash: HashInput, args: ConnectionArgs
    ) -> Connection[Transaction]:
        """Newest-first transactions touching ``address_hash``."""
        descriptor = queries.transactions_for_address(Hash.address(address_hash))
        return await self._connection(session, descriptor, args)

    async def list_transactions(
        self, session: AsyncSession, *, page_number: int = 1, page_size: int | None = None
    ) -> Sequence[Transaction]:
        size = self._offset_page_size(page_size)
        return await self.list_page(session, queries.transaction_list(page_number, size))

    async def total_transaction_count(self, session: AsyncSession) -> int:
        """Number of indexed transactions.

        Raises:
            InternalServerException: If the count query yields no row.
        """
        return int(await self.scalar(session, queries.total_transaction_count()))


class InternalTransactionRepository(_ChainRepository[InternalTransaction]):
    def __init__(self, pagination: PaginationSettings | None = None) -> None:
        super().__init__(InternalTransaction, pagination)

    async def get_internal_transaction(
        self, session: AsyncSession, transaction_hash: HashInput, index: int
    ) -> InternalTransaction:
        """Finalized internal transaction by ``(transaction_hash, index)``.

        Internal transactions of a pending block, or of a transaction with a
        single internal transaction, are reported as not found.

        Raises:
            NotFoundException: ``"Internal transaction not found."``
        """
        key = Hash.full(transaction_hash)
        internal = await self.get_one(session, queries.internal_transaction_by_key(key, index))
        if internal is None:
            raise self._not_found(
                "Internal transaction not found.",
                "internal-transaction-not-found",
                transaction_hash=str(key),
                index=index,
            )
        return internal

    async def internal_transactions_for_transaction(
        self, session: AsyncSession, transaction_hash: HashInput, args: ConnectionArgs
    ) -> Connection[InternalTransaction]:
        descriptor = queries.internal_transactions_for_transaction(Hash.full(transaction_hash))
        return await self._connection(session, descriptor, args)


class TokenTransferRepository(_ChainRepository[TokenTransfer]):
    def __init__(self, pagination: PaginationSettings | None = None) -> None:
        super().__init__(TokenTransfer, pagination)

    async def get_token_transfer(
        self, session: AsyncSession, transaction_hash: HashInput, log_index: int
    ) -> TokenTransfer:
        """Token transfer by ``(transaction_hash, log_index)``.

        Raises:
            NotFoundException: ``"Token transfer not found."``
        """
        key = Hash.full(transaction_hash)
        transfer = await self.get_one(session, queries.token_transfer_by_key(key, log_index))
        if transfer is None:
            raise self._not_found(
                "Token transfer not found.",
                "token-transfer-not-found",
                transaction_hash=str(key),
                log_index=log_index,
            )
        return transfer

    async def token_transfers_for_contract(
        self, session: AsyncSession, contract_hash: HashInput, args: ConnectionArgs
    ) -> Connection[TokenTransfer]:
        descriptor = queries.token_transfers_for_contract(Hash.address(contract_hash))
        return await self._connection(session, descriptor, args)


# Repository singletons
_block_repository: BlockRepository | None = None
_address_repository: AddressRepository | None = None
_transaction_repository: TransactionRepository | None = None
_internal_transaction_repository: InternalTransactionRepository | None = None
_token_transfer_repository: TokenTransferRepository | None = None


def get_block_repository() -> BlockRepository:
    global _block_repository
    if _block_repository is None:
        _block_repository = BlockRepository()
    return _block_repository


def get_address_repository() -> AddressRepository:
    global _address_repository
    if _address_repository is None:
        _address_repository = AddressRepository()
    return _address_repository


def get_transaction_repository() -> TransactionRepository:
    global _transaction_repository
    if _transaction_repository is None:
        _transaction_repository = TransactionRepository()
    return _transaction_repository


def get_internal_transaction_repository() -> InternalTransactionRepository:
    global _internal_transaction_repository
    if _internal_transaction_repository is None:
        _internal_transaction_repository = InternalTransactionRepository()
    return _internal_transaction_repository


def get_token_transfer_repository() -> TokenTransferRepository:
    global _token_transfer_repository
    if _token_transfer_repository is None:
        _token_transfer_repository = TokenTransferRepository()
    return _token_transfer_repository


__all__ = [
    "AddressRepository",
    "BlockRepository",
    "InternalTransactionRepository",
    "TokenTransferRepository",
    "TransactionRepository",
    "get_address_repository",
    "get_block_repository",
    "get_internal_transaction_repository",
    "get_token_transfer_repository",
    "get_transaction_repository",
]
