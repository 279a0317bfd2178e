"""Filter composition and keyset pagination over ``history_effects``."""

from dataclasses import dataclass, replace
import logging
from typing import TYPE_CHECKING, Optional, Type

from pydantic import BaseModel

from effectlog.lib import toid
from effectlog.lib.enums import PageOrder
from effectlog.lib.toid import MAX_INT32
from effectlog.services.history.errors import HistoryError, InvalidOrder, NotFound
from effectlog.services.history.models import Effect
from effectlog.services.history.utils.constants import DEFAULT_PAIR_SEP
from effectlog.services.history.utils.pagination import PageQuery
from effectlog.services.history.utils.query_builder import Predicate, SelectSpec

if TYPE_CHECKING:
    from effectlog.services.history.q import HistoryQ

logger = logging.getLogger(__name__)

OPERATION_ID = 'heff.history_operation_id'
EFFECT_ORDER = 'heff."order"'

SELECT_EFFECT = SelectSpec(
    columns=('heff.*', 'hacc.address'),
    from_='history_effects heff',
    joins=('LEFT JOIN history_accounts hacc ON hacc.id = heff.history_account_id',),
)

SELECT_POOL_OPERATIONS = SelectSpec(
    columns=('holp.history_operation_id',),
    from_='history_operation_liquidity_pools holp',
)


def keyset_predicate(
    order: str,
    key_column: str,
    key: int,
    order_column: Optional[str] = None,
    minor: Optional[int] = None,
) -> tuple[Predicate, tuple[str, ...]]:
    """Build the "strictly after the cursor" predicate and its ordering.

    With ``order_column`` the result is the two column keyset condition::

        key >= K AND (key > K OR (key = K AND ord > m))

    The leading ``key >= K`` repeats what the OR already implies. It must
    stay: it gives the planner a range on the first index column, without it
    the OR alone ends up as a full scan.

    Without ``order_column`` the bound is the inclusive ``key >= K`` (or
    ``<=``), used to scan a table keyed by operation only.

    Args:
        order: ``asc`` or ``desc``.
        key_column: Leading ordered column.
        key: Cursor value for ``key_column``.
        order_column: Tie-break column, if any.
        minor: Cursor value for ``order_column``.

    Returns:
        Tuple of (predicate, ORDER BY terms).

    Raises:
        InvalidOrder: If ``order`` is not ``asc`` or ``desc``.
    """
    if order == PageOrder.ASC.value:
        bound, strict, direction = '>=', '>', 'asc'
    elif order == PageOrder.DESC.value:
        bound, strict, direction = '<=', '<', 'desc'
    else:
        raise InvalidOrder(order)

    if order_column is None:
        return Predicate(f"{key_column} {bound} ?", (key,)), (f"{key_column} {direction}",)

    predicate = Predicate(
        f"{key_column} {bound} ? AND ("
        f"{key_column} {strict} ? OR ({key_column} = ? AND {order_column} {strict} ?))",
        (key, key, key, minor),
    )
    return predicate, (f"{key_column} {direction}", f"{order_column} {direction}")


@dataclass(frozen=True)
class EffectsQuery:
    """Effects query under construction.

    Each method returns a new query. Once a step fails the error is kept in
    ``err``; later steps return the query unchanged and ``select`` raises the
    error without running anything.

    Usage:
        async with history.read_snapshot() as conn:
            q = HistoryQ(conn).effects()
            q = await q.for_account(address)
            effects = await q.page(page).select()
    """

    q: 'HistoryQ'
    spec: SelectSpec = SELECT_EFFECT
    err: Optional[HistoryError] = None

    def _where(self, predicate: Predicate) -> 'EffectsQuery':
        return replace(self, spec=self.spec.where(predicate))

    def _fail(self, err: HistoryError) -> 'EffectsQuery':
        logger.debug(f"EffectsQuery: latched {type(err).__name__}: {err}")
        return replace(self, err=err)

    async def for_account(self, address: str) -> 'EffectsQuery':
        """Only effects owned by the account with ``address``."""
        if self.err is not None:
            return self
        try:
            account_id = await self.q.account_by_address(address)
        except HistoryError as e:
            return self._fail(e)
        return self._where(Predicate.eq('heff.history_account_id', account_id))

    async def for_ledger(self, sequence: int) -> 'EffectsQuery':
        """Only effects in the ledger with ``sequence``.

        Sequences outside ``[0, MAX_INT32)`` have no key range (the last one
        has no next ledger to bound it) and are reported as not found
        without a lookup.
        """
        if self.err is not None:
            return self
        if not 0 <= sequence < MAX_INT32:
            return self._fail(NotFound('ledger', sequence))
        try:
            await self.q.ledger_by_sequence(sequence)
        except HistoryError as e:
            return self._fail(e)
        start = toid.ledger_start(sequence)
        end = toid.ledger_start(sequence + 1)
        return self._where(Predicate.key_range(OPERATION_ID, start, end))

    def for_operation(self, operation_id: int) -> 'EffectsQuery':
        """Only effects of the operation ``operation_id``."""
        if self.err is not None:
            return self
        try:
            start = toid.parse(operation_id)
            end = start.inc_operation_order()
        except toid.InvalidTOID:
            return self._fail(NotFound('operation', operation_id))
        return self._where(Predicate.key_range(OPERATION_ID, start.to_int(), end.to_int()))

    async def for_transaction(self, tx_hash: str) -> 'EffectsQuery':
        """Only effects of the transaction with ``tx_hash``."""
        if self.err is not None:
            return self
        try:
            tx_id = await self.q.transaction_by_hash(tx_hash)
        except HistoryError as e:
            return self._fail(e)
        try:
            start = toid.parse(tx_id)
            end = start.inc_transaction_order()
        except toid.InvalidTOID:
            return self._fail(NotFound('transaction', tx_hash))
        return self._where(Predicate.key_range(OPERATION_ID, start.to_int(), end.to_int()))

    async def for_liquidity_pool(self, page: PageQuery, pool_id: str) -> 'EffectsQuery':
        """Only effects of operations that touched the liquidity pool ``pool_id``.

        The operations are looked up with a keyset scan of
        ``history_operation_liquidity_pools`` that starts at the page cursor's
        operation and returns at most ``page.limit`` ids, so it never reads
        the pool's whole history. The bound is inclusive because the cursor
        operation may still have effects after the cursor.
        """
        if self.err is not None:
            return self
        try:
            operation_id, _ = page.cursor_int64_pair(DEFAULT_PAIR_SEP)
            bound, ordering = keyset_predicate(page.order, 'holp.history_operation_id', operation_id)
            pool = await self.q.liquidity_pool_by_id(pool_id)
            spec = (
                SELECT_POOL_OPERATIONS
                .where(Predicate.eq('holp.history_liquidity_pool_id', pool))
                .where(bound)
                .order_by(*ordering)
                .with_limit(page.limit)
            )
            rows = await self.q.select(spec)
        except HistoryError as e:
            return self._fail(e)

        operation_ids = [row['history_operation_id'] for row in rows]
        return self._where(Predicate.is_in(OPERATION_ID, operation_ids))

    def page(self, page: PageQuery) -> 'EffectsQuery':
        """Resume after ``page.cursor`` in ``page.order``, at most ``page.limit`` rows."""
        if self.err is not None:
            return self
        try:
            operation_id, idx = page.cursor_int64_pair(DEFAULT_PAIR_SEP)
            # The order column is an int32; wider cursors are clamped
            idx = min(idx, MAX_INT32)
            predicate, ordering = keyset_predicate(
                page.order, OPERATION_ID, operation_id, EFFECT_ORDER, idx
            )
        except HistoryError as e:
            return self._fail(e)
        return replace(
            self,
            spec=self.spec.where(predicate).order_by(*ordering).with_limit(page.limit),
        )

    async def select(self, into: Type[BaseModel] = Effect, timeout: Optional[float] = None) -> list:
        """Run the query and materialize rows as ``into`` instances.

        Args:
            into: Pydantic model each row is validated into.
            timeout: Statement timeout in seconds, passed to the driver.

        Raises:
            HistoryError: The error latched while building, before any I/O.
            StorageError: If the select itself fails.
        """
        if self.err is not None:
            raise self.err
        rows = await self.q.select(self.spec, timeout=timeout)
        return [into.model_validate(dict(row)) for row in rows]
