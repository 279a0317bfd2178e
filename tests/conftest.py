"""Shared pytest fixtures for effectlog tests."""
import pytest
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock
import asyncpg
from fastapi.testclient import TestClient

from effectlog.services.history import History


# pytest-asyncio runs in auto mode (see pyproject.toml)


@pytest.fixture
def mock_asyncpg_pool() -> AsyncMock:
    """Mock asyncpg pool."""
    pool = AsyncMock(spec=asyncpg.Pool)
    pool._closed = False
    pool.fetchval = AsyncMock()
    pool.fetch = AsyncMock()
    pool.fetchrow = AsyncMock()
    return pool


@pytest.fixture
def mock_asyncpg_conn(mock_asyncpg_pool: AsyncMock) -> AsyncMock:
    """Mock asyncpg connection handed out by ``pool.acquire()``."""
    conn = AsyncMock(spec=asyncpg.Connection)
    conn.fetchval = AsyncMock(return_value=None)
    conn.fetch = AsyncMock(return_value=[])

    mock_asyncpg_pool.acquire.return_value.__aenter__ = AsyncMock(return_value=conn)
    mock_asyncpg_pool.acquire.return_value.__aexit__ = AsyncMock(return_value=None)

    return conn


def snapshot_of(conn):
    """Build a ``read_snapshot`` replacement that always yields ``conn``."""
    @asynccontextmanager
    async def read_snapshot():
        yield conn
    return read_snapshot


@pytest.fixture
def history_with_mocks(
    mock_asyncpg_pool: AsyncMock,
    mock_asyncpg_conn: AsyncMock,
    monkeypatch: pytest.MonkeyPatch
) -> History:
    """Create History whose snapshots yield the mocked connection."""
    hist = History(
        pool=mock_asyncpg_pool,
        api_port=0  # Use random port for testing
    )
    monkeypatch.setattr(hist, "read_snapshot", snapshot_of(mock_asyncpg_conn))
    return hist


@pytest.fixture
def history_client(history_with_mocks: History) -> TestClient:
    """Create FastAPI TestClient for History."""
    return TestClient(history_with_mocks._api_app)
