"""Read session over the history tables."""

import logging
from typing import Any, Optional

import asyncpg

from effectlog.services.history.effects import EffectsQuery
from effectlog.services.history.errors import LookupFailed, NotFound, StorageError
from effectlog.services.history.utils.constants import QUERIES
from effectlog.services.history.utils.query_builder import SelectSpec

logger = logging.getLogger(__name__)

# Errors that mean storage could not answer, as opposed to "no such row"
STORAGE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class HistoryQ:
    """Run history lookups and selects on a single connection.

    Open one per request, inside ``DatabaseHandler.read_snapshot()``, so the
    lookups a filter performs and the final select see the same data.
    Not safe for concurrent use.
    """

    def __init__(self, conn: asyncpg.Connection) -> None:
        self.conn = conn

    def effects(self) -> EffectsQuery:
        """Start an effects query over the whole log."""
        return EffectsQuery(self)

    async def _resolve(self, entity: str, query_name: str, key: Any) -> int:
        try:
            value = await self.conn.fetchval(QUERIES[query_name], key)
        except STORAGE_ERRORS as e:
            logger.error(f"HistoryQ._resolve: Error looking up {entity} {key!r}: {e}", exc_info=True)
            raise LookupFailed(entity, key) from e
        if value is None:
            logger.debug(f"HistoryQ._resolve: {entity} {key!r} not found")
            raise NotFound(entity, key)
        return value

    async def account_by_address(self, address: str) -> int:
        """Internal id of the account with ``address``."""
        return await self._resolve('account', 'account_by_address', address)

    async def ledger_by_sequence(self, sequence: int) -> int:
        """Internal id of the ledger with ``sequence``."""
        return await self._resolve('ledger', 'ledger_by_sequence', sequence)

    async def transaction_by_hash(self, tx_hash: str) -> int:
        """Total order id of the transaction with ``tx_hash`` (outer or inner hash)."""
        return await self._resolve('transaction', 'transaction_by_hash', tx_hash)

    async def liquidity_pool_by_id(self, pool_id: str) -> int:
        """Internal id of the liquidity pool with the hex ``pool_id``."""
        return await self._resolve('liquidity pool', 'liquidity_pool_by_id', pool_id)

    async def select(self, spec: SelectSpec, timeout: Optional[float] = None) -> list:
        """Run ``spec`` and return its rows.

        Args:
            spec: Statement to run.
            timeout: Seconds before asyncpg cancels the statement.

        Raises:
            StorageError: If the statement fails; the driver error is chained.
        """
        query, params = spec.render()
        try:
            return await self.conn.fetch(query, *params, timeout=timeout)
        except STORAGE_ERRORS as e:
            logger.error(f"HistoryQ.select: Error running select from {spec.from_}: {e}", exc_info=True)
            raise StorageError(f"select from {spec.from_} failed: {e}") from e
