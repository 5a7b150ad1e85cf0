"""A small, fully known ledger used across repository and GraphQL tests.

Layout:

    blocks 98, 99, 100, 101 (consensus) and an uncle at 100
    block 101 is pending (internal transactions not finalized)

    TX_1  block 100 index 2  ALICE -> PAT
    TX_2  block 100 index 1  PAT -> BOB
    TX_3  block  99 index 0  ALICE creates TOKEN
    TX_4  block  98 index 0  BOB -> CAROL
    TX_5  block 101 index 0  CAROL -> ALICE
    TX_6  block  99 index 1  ALICE -> CAROL

    internal transactions: TX_1 has three, TX_2 has one, TX_5 has two
    token transfers of TOKEN: (TX_1, 3), (TX_1, 0), (TX_3, 1), (TX_6, 0)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from explorer_service.core.database import Hash
from explorer_service.features.chain.models import (
    Address,
    Block,
    InternalTransaction,
    PendingBlockOperation,
    TokenTransfer,
    Transaction,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


def address_hash(n: int) -> Hash:
    return Hash.address(n.to_bytes(20, "big"))


def full_hash(n: int) -> Hash:
    return Hash.full(n.to_bytes(32, "big"))


ALICE = address_hash(1)
BOB = address_hash(2)
CAROL = address_hash(3)
DAVE = address_hash(4)
ERIN = address_hash(5)
PAT = address_hash(7)
OTHER_TOKEN = address_hash(8)
TOKEN = address_hash(9)
MINER = address_hash(0xEE)

TX_1 = full_hash(0x11)
TX_2 = full_hash(0x12)
TX_3 = full_hash(0x13)
TX_4 = full_hash(0x14)
TX_5 = full_hash(0x15)
TX_6 = full_hash(0x16)

UNCLE_100 = full_hash(0x2100)


def block_hash(number: int) -> Hash:
    return full_hash(0x1000 + number)


@dataclass(frozen=True)
class Ledger:
    """Expected values derived from the seeded rows."""

    transaction_count: int = 6
    pending_block_number: int = 101


def _block(number: int, timestamp: datetime, *, consensus: bool = True, hash: Hash | None = None) -> Block:  # noqa: A002
    return Block(
        hash=hash or block_hash(number),
        number=number,
        parent_hash=block_hash(number - 1),
        miner_hash=MINER,
        consensus=consensus,
        difficulty=Decimal(2),
        total_difficulty=Decimal(number * 2),
        gas_limit=Decimal(8_000_000),
        gas_used=Decimal(21_000),
        size=512,
        timestamp=timestamp,
    )


def make_transaction(
    hash: Hash,  # noqa: A002
    block_number: int,
    index: int,
    inserted_at: datetime,
    *,
    from_address: Hash,
    to_address: Hash | None = None,
    created_contract: Hash | None = None,
) -> Transaction:
    return Transaction(
        hash=hash,
        block_hash=block_hash(block_number),
        block_number=block_number,
        index=index,
        from_address_hash=from_address,
        to_address_hash=to_address,
        created_contract_address_hash=created_contract,
        value=Decimal(1000),
        gas=Decimal(21_000),
        gas_price=Decimal(1),
        gas_used=Decimal(21_000),
        cumulative_gas_used=Decimal(21_000),
        nonce=index,
        input=b"\x01\x02",
        status=1,
        inserted_at=inserted_at,
        updated_at=inserted_at,
    )


def _internal(transaction: Transaction, index: int) -> InternalTransaction:
    return InternalTransaction(
        transaction_hash=transaction.hash,
        index=index,
        block_number=transaction.block_number,
        transaction_index=transaction.index,
        type="call",
        call_type="call",
        from_address_hash=transaction.from_address_hash,
        to_address_hash=transaction.to_address_hash,
        value=Decimal(index),
        gas=Decimal(10_000),
        gas_used=Decimal(5_000),
        input=b"",
        output=b"",
    )


def _transfer(transaction: Transaction, log_index: int, token: Hash) -> TokenTransfer:
    return TokenTransfer(
        transaction_hash=transaction.hash,
        log_index=log_index,
        block_number=transaction.block_number,
        block_hash=transaction.block_hash,
        from_address_hash=transaction.from_address_hash,
        to_address_hash=BOB,
        token_contract_address_hash=token,
        amount=Decimal(10 + log_index),
    )


async def seed_ledger(session: AsyncSession) -> Ledger:
    """Insert the ledger described in the module docstring and commit."""
    session.add_all(
        [
            _block(98, BASE_TIME),
            _block(99, BASE_TIME + timedelta(minutes=1)),
            _block(100, BASE_TIME + timedelta(minutes=2)),
            _block(100, BASE_TIME + timedelta(seconds=90), consensus=False, hash=UNCLE_100),
            _block(101, BASE_TIME + timedelta(minutes=3)),
        ]
    )
    await session.flush()
    session.add(PendingBlockOperation(block_hash=block_hash(101), block_number=101))

    session.add_all(
        [
            Address(hash=ALICE, fetched_coin_balance=Decimal(500), fetched_coin_balance_block_number=100),
            Address(hash=BOB, fetched_coin_balance=Decimal(300), fetched_coin_balance_block_number=100),
            Address(hash=CAROL, fetched_coin_balance=Decimal(0), fetched_coin_balance_block_number=100),
            Address(hash=DAVE, fetched_coin_balance=None),
            Address(hash=ERIN, fetched_coin_balance=Decimal(300), fetched_coin_balance_block_number=99),
            Address(hash=PAT, fetched_coin_balance=Decimal(0)),
            Address(
                hash=TOKEN,
                fetched_coin_balance=Decimal(100),
                contract_code=b"\x60\x80",
            ),
        ]
    )

    def at(seconds: int) -> datetime:
        return BASE_TIME + timedelta(hours=1, seconds=seconds)

    tx_1 = make_transaction(TX_1, 100, 2, at(1), from_address=ALICE, to_address=PAT)
    tx_2 = make_transaction(TX_2, 100, 1, at(2), from_address=PAT, to_address=BOB)
    tx_3 = make_transaction(TX_3, 99, 0, at(3), from_address=ALICE, created_contract=TOKEN)
    tx_4 = make_transaction(TX_4, 98, 0, at(4), from_address=BOB, to_address=CAROL)
    tx_5 = make_transaction(TX_5, 101, 0, at(5), from_address=CAROL, to_address=ALICE)
    tx_6 = make_transaction(TX_6, 99, 1, at(6), from_address=ALICE, to_address=CAROL)
    session.add_all([tx_1, tx_2, tx_3, tx_4, tx_5, tx_6])
    await session.flush()

    session.add_all(
        [
            _internal(tx_1, 0),
            _internal(tx_1, 1),
            _internal(tx_1, 2),
            _internal(tx_2, 0),
            _internal(tx_5, 0),
            _internal(tx_5, 1),
            _transfer(tx_1, 0, TOKEN),
            _transfer(tx_1, 3, TOKEN),
            _transfer(tx_3, 1, TOKEN),
            _transfer(tx_6, 0, TOKEN),
            _transfer(tx_4, 0, OTHER_TOKEN),
        ]
    )
    await session.commit()
    return Ledger()
