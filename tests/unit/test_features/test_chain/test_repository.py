"""Tests for chain repositories against the seeded SQLite ledger."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from explorer_service.core.exceptions import (
    InternalServerException,
    InvalidArgumentException,
    InvalidCursorException,
    NotFoundException,
)
from explorer_service.core.pagination import ConnectionArgs, CursorCodec, CursorData
from explorer_service.core.settings.pagination import PaginationSettings
from explorer_service.features.chain.repository import (
    AddressRepository,
    BlockRepository,
    InternalTransactionRepository,
    TokenTransferRepository,
    TransactionRepository,
)
from tests.fixtures.ledger import (
    ALICE,
    BASE_TIME,
    BOB,
    DAVE,
    ERIN,
    PAT,
    TOKEN,
    TX_1,
    TX_2,
    TX_3,
    TX_4,
    TX_5,
    TX_6,
    UNCLE_100,
    address_hash,
    block_hash,
    full_hash,
    make_transaction,
)


@pytest.fixture
def pagination() -> PaginationSettings:
    return PaginationSettings(default_limit=10, max_limit=3, cursor_page_size=10, max_cursor_page_size=50)


def _positions(connection):
    return [(edge.node.block_number, edge.node.index) for edge in connection.edges]


# ============================================================================
# Lookups
# ============================================================================


class TestLookups:
    async def test_get_transaction(self, db_session, ledger):
        transaction = await TransactionRepository().get_transaction(db_session, TX_1)
        assert transaction.hash == TX_1
        assert transaction.block_number == 100

    async def test_get_transaction_accepts_hex(self, db_session, ledger):
        transaction = await TransactionRepository().get_transaction(db_session, str(TX_2))
        assert transaction.hash == TX_2

    async def test_missing_transaction(self, db_session, ledger):
        with pytest.raises(NotFoundException) as exc_info:
            await TransactionRepository().get_transaction(db_session, full_hash(0xDEAD))
        assert exc_info.value.detail == "Transaction not found."

    async def test_wrong_length_hash_is_invalid_argument(self, db_session, ledger):
        with pytest.raises(InvalidArgumentException):
            await TransactionRepository().get_transaction(db_session, ALICE)

    async def test_get_block_returns_consensus_block(self, db_session, ledger):
        block = await BlockRepository().get_block(db_session, 100)
        assert block.hash == block_hash(100)
        assert block.hash != UNCLE_100

    async def test_missing_block(self, db_session, ledger):
        with pytest.raises(NotFoundException) as exc_info:
            await BlockRepository().get_block(db_session, 12345)
        assert exc_info.value.detail == "Block number 12345 was not found."

    async def test_get_address(self, db_session, ledger):
        address = await AddressRepository().get_address(db_session, str(TOKEN))
        assert address.contract_code == b"\x60\x80"

    async def test_missing_address(self, db_session, ledger):
        with pytest.raises(NotFoundException) as exc_info:
            await AddressRepository().get_address(db_session, address_hash(0xABC))
        assert exc_info.value.detail == "Address not found."

    async def test_get_token_transfer(self, db_session, ledger):
        transfer = await TokenTransferRepository().get_token_transfer(db_session, TX_1, 3)
        assert transfer.token_contract_address_hash == TOKEN

    async def test_missing_token_transfer(self, db_session, ledger):
        with pytest.raises(NotFoundException) as exc_info:
            await TokenTransferRepository().get_token_transfer(db_session, TX_1, 99)
        assert exc_info.value.detail == "Token transfer not found."


class TestInternalTransactionLookup:
    async def test_finalized_internal_transaction(self, db_session, ledger):
        internal = await InternalTransactionRepository().get_internal_transaction(db_session, TX_1, 1)
        assert internal.transaction_hash == TX_1
        assert internal.index == 1

    async def test_single_internal_transaction_is_not_found(self, db_session, ledger):
        with pytest.raises(NotFoundException) as exc_info:
            await InternalTransactionRepository().get_internal_transaction(db_session, TX_2, 0)
        assert exc_info.value.detail == "Internal transaction not found."

    async def test_pending_block_internal_transaction_is_not_found(self, db_session, ledger):
        with pytest.raises(NotFoundException) as exc_info:
            await InternalTransactionRepository().get_internal_transaction(db_session, TX_5, 1)
        assert exc_info.value.detail == "Internal transaction not found."

    async def test_missing_index(self, db_session, ledger):
        with pytest.raises(NotFoundException):
            await InternalTransactionRepository().get_internal_transaction(db_session, TX_1, 7)


# ============================================================================
# Connections
# ============================================================================


class TestTransactionsForAddress:
    async def test_sorted_without_duplicates_or_omissions(self, db_session, ledger):
        connection = await TransactionRepository().transactions_for_address(
            db_session, ALICE, ConnectionArgs()
        )
        assert _positions(connection) == [(101, 0), (100, 2), (99, 1), (99, 0)]
        assert {edge.node.hash for edge in connection.edges} == {TX_5, TX_1, TX_6, TX_3}
        assert connection.page_info.has_next_page is False
        assert connection.page_info.has_previous_page is False

    async def test_end_to_end_forward_paging(self, db_session, ledger):
        repo = TransactionRepository()

        first = await repo.transactions_for_address(db_session, PAT, ConnectionArgs(first=1))
        assert _positions(first) == [(100, 2)]
        assert first.page_info.has_next_page is True

        second = await repo.transactions_for_address(
            db_session, PAT, ConnectionArgs(first=1, after=first.page_info.end_cursor)
        )
        assert _positions(second) == [(100, 1)]
        assert second.page_info.has_next_page is False
        assert second.page_info.has_previous_page is True

    async def test_after_continues_immediately_after_page(self, db_session, ledger):
        repo = TransactionRepository()
        page_one = await repo.transactions_for_address(db_session, ALICE, ConnectionArgs(first=2))
        page_two = await repo.transactions_for_address(
            db_session, ALICE, ConnectionArgs(first=2, after=page_one.page_info.end_cursor)
        )
        assert _positions(page_one) + _positions(page_two) == [(101, 0), (100, 2), (99, 1), (99, 0)]

    async def test_count_sets_page_size(self, db_session, ledger):
        connection = await TransactionRepository().transactions_for_address(
            db_session, ALICE, ConnectionArgs(count=3)
        )
        assert len(connection.edges) == 3
        assert connection.page_info.has_next_page is True

    async def test_backward_page_is_in_query_order(self, db_session, ledger):
        repo = TransactionRepository()
        everything = await repo.transactions_for_address(db_session, ALICE, ConnectionArgs())
        last_cursor = everything.edges[-1].cursor

        page = await repo.transactions_for_address(
            db_session, ALICE, ConnectionArgs(last=2, before=last_cursor)
        )
        assert _positions(page) == [(100, 2), (99, 1)]
        assert page.page_info.has_previous_page is True
        assert page.page_info.has_next_page is True

    async def test_before_ignores_count(self, db_session, ledger):
        repo = TransactionRepository()
        everything = await repo.transactions_for_address(db_session, ALICE, ConnectionArgs())
        page = await repo.transactions_for_address(
            db_session, ALICE, ConnectionArgs(before=everything.edges[-1].cursor, count=1)
        )
        assert _positions(page) == [(101, 0), (100, 2), (99, 1)]

    async def test_cursors_survive_new_rows_before_the_window(self, db_session, ledger):
        repo = TransactionRepository()
        page_one = await repo.transactions_for_address(db_session, ALICE, ConnectionArgs(first=2))

        db_session.add(
            make_transaction(full_hash(0x99), 101, 5, BASE_TIME, from_address=ALICE, to_address=BOB)
        )
        await db_session.flush()

        page_two = await repo.transactions_for_address(
            db_session, ALICE, ConnectionArgs(first=2, after=page_one.page_info.end_cursor)
        )
        assert _positions(page_two) == [(99, 1), (99, 0)]

    async def test_edge_cursor_encodes_ordering_key(self, db_session, ledger):
        connection = await TransactionRepository().transactions_for_address(
            db_session, PAT, ConnectionArgs(first=1)
        )
        data = CursorCodec.decode(connection.edges[0].cursor)
        assert data.key == (100, 2, str(TX_1))
        assert connection.page_info.start_cursor == connection.edges[0].cursor

    async def test_garbage_cursor(self, db_session, ledger):
        with pytest.raises(InvalidCursorException):
            await TransactionRepository().transactions_for_address(
                db_session, ALICE, ConnectionArgs(after="garbage")
            )

    async def test_cursor_from_another_collection(self, db_session, ledger):
        cursor = CursorCodec.encode(CursorData(values={"block_number": 100, "log_index": 1}))
        with pytest.raises(InvalidCursorException):
            await TransactionRepository().transactions_for_address(
                db_session, ALICE, ConnectionArgs(after=cursor)
            )

    async def test_conflicting_arguments(self, db_session, ledger):
        with pytest.raises(InvalidArgumentException):
            await TransactionRepository().transactions_for_address(
                db_session, ALICE, ConnectionArgs(first=1, last=1)
            )

    async def test_empty_connection(self, db_session, ledger):
        connection = await TransactionRepository().transactions_for_address(
            db_session, DAVE, ConnectionArgs()
        )
        assert connection.edges == []
        assert connection.page_info.start_cursor is None
        assert connection.page_info.end_cursor is None

    async def test_page_size_is_capped(self, db_session, ledger):
        repo = TransactionRepository(
            PaginationSettings(cursor_page_size=10, max_cursor_page_size=2)
        )
        connection = await repo.transactions_for_address(db_session, ALICE, ConnectionArgs(first=50))
        assert len(connection.edges) == 2


class TestTokenTransfersForContract:
    async def test_order_and_scope(self, db_session, ledger):
        connection = await TokenTransferRepository().token_transfers_for_contract(
            db_session, TOKEN, ConnectionArgs()
        )
        keys = [(edge.node.block_number, edge.node.log_index) for edge in connection.edges]
        assert keys == [(100, 3), (100, 0), (99, 1), (99, 0)]
        assert [edge.node.transaction_hash for edge in connection.edges] == [TX_1, TX_1, TX_3, TX_6]

    async def test_paging(self, db_session, ledger):
        repo = TokenTransferRepository()
        first = await repo.token_transfers_for_contract(db_session, TOKEN, ConnectionArgs(first=3))
        rest = await repo.token_transfers_for_contract(
            db_session, TOKEN, ConnectionArgs(first=3, after=first.page_info.end_cursor)
        )
        assert len(first.edges) == 3
        assert first.page_info.has_next_page is True
        assert [(edge.node.transaction_hash, edge.node.log_index) for edge in rest.edges] == [(TX_6, 0)]


class TestInternalTransactionsForTransaction:
    async def test_trace_order(self, db_session, ledger):
        connection = await InternalTransactionRepository().internal_transactions_for_transaction(
            db_session, TX_1, ConnectionArgs()
        )
        assert [edge.node.index for edge in connection.edges] == [0, 1, 2]

    @pytest.mark.parametrize("transaction_hash", [TX_2, TX_5, TX_4])
    async def test_hidden_owners_yield_empty_connection(self, db_session, ledger, transaction_hash):
        connection = await InternalTransactionRepository().internal_transactions_for_transaction(
            db_session, transaction_hash, ConnectionArgs()
        )
        assert connection.edges == []


# ============================================================================
# Offset pages
# ============================================================================


class TestOffsetPages:
    async def test_wealthy_addresses(self, db_session, ledger):
        addresses = await AddressRepository().list_wealthy_addresses(db_session)
        assert [address.hash for address in addresses] == [ALICE, BOB, ERIN, TOKEN]

    async def test_page_zero_behaves_as_page_one(self, db_session, ledger):
        repo = AddressRepository()
        page_zero = await repo.list_wealthy_addresses(db_session, page_number=0, page_size=2)
        page_one = await repo.list_wealthy_addresses(db_session, page_number=1, page_size=2)
        assert [a.hash for a in page_zero] == [a.hash for a in page_one] == [ALICE, BOB]

    async def test_second_page(self, db_session, ledger):
        addresses = await AddressRepository().list_wealthy_addresses(
            db_session, page_number=2, page_size=2
        )
        assert [address.hash for address in addresses] == [ERIN, TOKEN]

    async def test_page_size_is_capped(self, db_session, ledger, pagination):
        addresses = await AddressRepository(pagination).list_wealthy_addresses(
            db_session, page_size=100
        )
        assert len(addresses) == 3

    async def test_negative_page_size(self, db_session, ledger):
        with pytest.raises(InvalidArgumentException) as exc_info:
            await AddressRepository().list_wealthy_addresses(db_session, page_size=-1)
        assert exc_info.value.detail == "`pageSize` must be a non-negative integer."

    async def test_blocks_newest_first(self, db_session, ledger):
        blocks = await BlockRepository().list_blocks(db_session)
        assert [block.hash for block in blocks] == [
            block_hash(101),
            block_hash(100),
            UNCLE_100,
            block_hash(99),
            block_hash(98),
        ]

    async def test_transactions_by_insertion(self, db_session, ledger):
        transactions = await TransactionRepository().list_transactions(db_session, page_size=3)
        assert [transaction.hash for transaction in transactions] == [TX_6, TX_5, TX_4]


# ============================================================================
# Aggregates and storage failures
# ============================================================================


class TestAggregates:
    async def test_total_transaction_count(self, db_session, ledger):
        assert await TransactionRepository().total_transaction_count(db_session) == 6

    async def test_empty_table_counts_zero(self, db_session):
        assert await TransactionRepository().total_transaction_count(db_session) == 0

    async def test_no_row_is_internal_error(self):
        # Regression: an aggregate that yields no row is a broken query, not zero.
        result = MagicMock()
        result.first.return_value = None
        session = MagicMock()
        session.execute = AsyncMock(return_value=result)

        with pytest.raises(InternalServerException) as exc_info:
            await TransactionRepository().total_transaction_count(session)
        assert exc_info.value.detail == "Something is wrong."


class TestStorageFailures:
    async def test_storage_error_becomes_internal_error(self):
        session = MagicMock()
        session.execute = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("gone")))

        with pytest.raises(InternalServerException) as exc_info:
            await TransactionRepository().get_transaction(session, TX_1)
        assert exc_info.value.detail == "Something is wrong."
        assert isinstance(exc_info.value.__cause__, OperationalError)

    async def test_timeout_becomes_internal_error(self):
        session = MagicMock()
        session.execute = AsyncMock(side_effect=TimeoutError())

        with pytest.raises(InternalServerException):
            await TransactionRepository().transactions_for_address(session, ALICE, ConnectionArgs())

    async def test_not_found_is_not_masked_as_internal(self, db_session, ledger):
        with pytest.raises(NotFoundException):
            await BlockRepository().get_block(db_session, 0)
