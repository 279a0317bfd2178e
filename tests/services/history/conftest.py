"""History test fixtures: record mocks and an in-memory effect log."""
import json
import re
import sqlite3

import pytest

from effectlog.lib import toid
from effectlog.lib.enums import EffectType


class MockRecord:
    """Mock asyncpg record that supports both dictionary and attribute access."""

    def __init__(self, **kwargs):
        self._data = kwargs
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __getitem__(self, key):
        return self._data[key]

    def get(self, key, default=None):
        return self._data.get(key, default)

    def keys(self):
        """Support dict() conversion."""
        return self._data.keys()

    def __iter__(self):
        return iter(self._data)


def effect_record(operation_id: int, order: int, account_id: int = 1, **extra) -> MockRecord:
    """Effect row as returned by the base effects select."""
    data = dict(
        history_account_id=account_id,
        address=f"GACCOUNT{account_id}",
        history_operation_id=operation_id,
        order=order,
        type=int(EffectType.ACCOUNT_CREDITED),
        details=json.dumps({"amount": "10.0000000", "asset_type": "native"}),
    )
    data.update(extra)
    return MockRecord(**data)


# =============================================================================
# In-memory effect log
# =============================================================================

SCHEMA = """
CREATE TABLE history_accounts (id INTEGER PRIMARY KEY, address TEXT UNIQUE);
CREATE TABLE history_ledgers (id INTEGER PRIMARY KEY, sequence INTEGER UNIQUE);
CREATE TABLE history_transactions (
    id INTEGER PRIMARY KEY, transaction_hash TEXT, inner_transaction_hash TEXT
);
CREATE TABLE history_liquidity_pools (id INTEGER PRIMARY KEY, liquidity_pool_id TEXT UNIQUE);
CREATE TABLE history_operation_liquidity_pools (
    history_operation_id INTEGER, history_liquidity_pool_id INTEGER
);
CREATE TABLE history_effects (
    history_account_id INTEGER,
    history_operation_id INTEGER,
    "order" INTEGER,
    type INTEGER,
    details TEXT,
    PRIMARY KEY (history_operation_id, "order")
);
"""

ACCOUNTS = {1: "GALICE", 2: "GBOB"}
LEDGERS = (2, 3, 4)
POOL_ID = "ab" * 32


def tx_hash(ledger: int, tx: int) -> str:
    return f"{ledger:032x}{tx:032x}"


def seed_effects() -> list[tuple]:
    """Effects for ledgers 2-4, two transactions each, two operations each.

    Operations carry between one and three effects so pages regularly split
    an operation.
    """
    rows = []
    for ledger in LEDGERS:
        for tx in (1, 2):
            for op in (1, 2):
                op_id = toid.new(ledger, tx, op).to_int()
                for order in range(1, (ledger + tx + op) % 3 + 2):
                    account = 1 if (ledger + op + order) % 2 else 2
                    details = json.dumps({"amount": f"{order}.0000000", "asset_type": "native"})
                    rows.append((account, op_id, order, int(EffectType.ACCOUNT_CREDITED), details))
    return rows


def pool_operations() -> list[int]:
    """Operations that touched the liquidity pool."""
    ops = [toid.new(3, tx, op).to_int() for tx in (1, 2) for op in (1, 2)]
    ops.append(toid.new(4, 1, 2).to_int())
    return ops


class SQLiteConn:
    """Stand-in for an asyncpg connection backed by sqlite.

    ``$n`` placeholders become sqlite's ``?n``. ``calls`` counts statements.
    """

    def __init__(self, db: sqlite3.Connection):
        self.db = db
        self.calls = 0
        self.statements: list[str] = []

    def _run(self, query: str, args: tuple) -> list[sqlite3.Row]:
        self.calls += 1
        self.statements.append(query)
        return self.db.execute(re.sub(r"\$(\d+)", r"?\1", query), args).fetchall()

    async def fetch(self, query, *args, timeout=None):
        return [dict(row) for row in self._run(query, args)]

    async def fetchval(self, query, *args, timeout=None):
        rows = self._run(query, args)
        return rows[0][0] if rows else None


@pytest.fixture
def effects_db():
    """Seeded in-memory sqlite database."""
    # TestClient serves requests from its own portal thread
    db = sqlite3.connect(":memory:", check_same_thread=False)
    db.row_factory = sqlite3.Row
    db.executescript(SCHEMA)
    db.executemany("INSERT INTO history_accounts VALUES (?, ?)", ACCOUNTS.items())
    db.executemany("INSERT INTO history_ledgers VALUES (?, ?)", [(i, seq) for i, seq in enumerate(LEDGERS, 1)])
    db.executemany(
        "INSERT INTO history_transactions VALUES (?, ?, NULL)",
        [(toid.new(ledger, tx).to_int(), tx_hash(ledger, tx)) for ledger in LEDGERS for tx in (1, 2)],
    )
    db.execute("INSERT INTO history_liquidity_pools VALUES (1, ?)", (POOL_ID,))
    db.executemany(
        "INSERT INTO history_operation_liquidity_pools VALUES (?, 1)",
        [(op,) for op in pool_operations()],
    )
    db.executemany("INSERT INTO history_effects VALUES (?, ?, ?, ?, ?)", seed_effects())
    yield db
    db.close()


@pytest.fixture
def sqlite_conn(effects_db: sqlite3.Connection) -> SQLiteConn:
    return SQLiteConn(effects_db)
