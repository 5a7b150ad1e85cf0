"""Tests for chain query descriptors.

Descriptors never touch the database, so these tests inspect the statements
they compile to.
"""

from __future__ import annotations

import pytest
from sqlalchemy.dialects import postgresql

from explorer_service.features.chain import queries
from explorer_service.features.chain.models import Address, Block, Transaction
from tests.fixtures.ledger import ALICE, TOKEN, TX_1


def _sql(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


class TestPageOffset:
    @pytest.mark.parametrize(
        ("page_number", "page_size", "offset"),
        [(1, 10, 0), (2, 10, 10), (3, 25, 50), (0, 10, 0), (-5, 10, 0)],
    )
    def test_offset(self, page_number, page_size, offset):
        assert queries.page_offset(page_number, page_size) == offset

    def test_page_zero_matches_page_one(self):
        assert queries.wealthy_addresses(0, 10).offset == queries.wealthy_addresses(1, 10).offset


class TestConnectionDescriptors:
    def test_transactions_for_address_matches_any_role(self):
        sql = _sql(queries.transactions_for_address(ALICE).to_statement())
        assert "transactions.to_address_hash = " in sql
        assert "transactions.from_address_hash = " in sql
        assert "transactions.created_contract_address_hash = " in sql
        assert " OR " in sql

    def test_transactions_for_address_order_is_total(self):
        descriptor = queries.transactions_for_address(ALICE)
        assert [column.key for column in descriptor.sort_fields] == ["block_number", "index", "hash"]
        assert descriptor.sort_orders == ["desc", "desc", "desc"]

    def test_token_transfers_join_owning_transaction(self):
        descriptor = queries.token_transfers_for_contract(TOKEN)
        sql = _sql(descriptor.to_statement())
        assert "JOIN transactions ON token_transfers.transaction_hash = transactions.hash" in sql
        assert [column.key for column in descriptor.sort_fields] == [
            "block_number",
            "log_index",
            "transaction_hash",
        ]

    def test_internal_transactions_exclude_pending_and_single(self):
        sql = _sql(queries.internal_transactions_for_transaction(TX_1).to_statement())
        assert "NOT (EXISTS (SELECT" in sql
        assert "pending_block_operations.block_hash = transactions.block_hash" in sql
        assert "count(*)" in sql
        assert "ORDER BY internal_transactions.index ASC" in sql

    def test_connection_descriptors_have_no_page_window(self):
        descriptor = queries.transactions_for_address(ALICE)
        assert descriptor.limit is None
        assert descriptor.offset == 0
        assert "LIMIT" not in _sql(descriptor.base_statement())
        assert "ORDER BY" not in _sql(descriptor.base_statement())


class TestOffsetDescriptors:
    def test_wealthy_addresses(self):
        descriptor = queries.wealthy_addresses(3, 20)
        assert descriptor.model is Address
        assert descriptor.limit == 20
        assert descriptor.offset == 40
        sql = _sql(descriptor.to_statement())
        assert "addresses.fetched_coin_balance > " in sql
        assert "ORDER BY addresses.fetched_coin_balance DESC, addresses.hash ASC" in sql

    def test_block_list_orders_by_timestamp(self):
        descriptor = queries.block_list(1, 5)
        assert descriptor.model is Block
        assert descriptor.sort_fields[0].key == "timestamp"
        assert descriptor.sort_orders[0] == "desc"

    def test_transaction_list_orders_by_insertion(self):
        descriptor = queries.transaction_list(2, 5)
        assert descriptor.model is Transaction
        assert descriptor.offset == 5
        assert descriptor.sort_fields[0].key == "inserted_at"
        assert descriptor.sort_orders[0] == "desc"


class TestLookups:
    def test_block_by_number_requires_consensus(self):
        sql = _sql(queries.block_by_number(7).to_statement())
        assert "blocks.consensus IS true" in sql

    def test_total_transaction_count(self):
        sql = _sql(queries.total_transaction_count().to_statement())
        assert sql.startswith("SELECT count(*)")
        assert "FROM transactions" in sql
