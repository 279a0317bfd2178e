"""Effect listing handlers for History."""

import logging
from typing import List, Optional

from fastapi import HTTPException, Path, Query

from effectlog.services.history.errors import (
    DetailsDecodeError,
    InvalidLimit,
    InvalidOrder,
    LookupFailed,
    MalformedCursor,
    NotFound,
    StorageError,
)
from effectlog.services.history.handlers.base import HandlerMixin
from effectlog.services.history.q import HistoryQ
from effectlog.services.history.schemas import EffectItem, EffectsPage
from effectlog.services.history.utils import PageQuery

logger = logging.getLogger(__name__)


class EffectHandlersMixin(HandlerMixin):
    """Mixin providing effect listing handlers.

    Handles:
        - All effects, optionally filtered by query parameters
        - Effects of one account, ledger, operation, transaction or pool
    """

    async def handle_get_effects(
        self,
        cursor: Optional[str] = Query(None, description="Paging token of the last effect already seen"),
        order: str = Query('asc', description="Sort order: 'asc' or 'desc'"),
        limit: Optional[int] = Query(None, description="Max effects to return (1-200, default 10)"),
        account_id: Optional[str] = Query(None, description="Account address"),
        ledger_id: Optional[int] = Query(None, description="Ledger sequence"),
        operation_id: Optional[int] = Query(None, description="Operation id"),
        transaction_hash: Optional[str] = Query(None, description="Transaction hash (hex)"),
        liquidity_pool_id: Optional[str] = Query(None, description="Liquidity pool id (hex)"),
    ) -> EffectsPage:
        """Return a page of effects; filters may be combined."""
        return await self._list_effects(
            cursor, order, limit,
            account_id=account_id,
            ledger_id=ledger_id,
            operation_id=operation_id,
            transaction_hash=transaction_hash,
            liquidity_pool_id=liquidity_pool_id,
        )

    async def handle_get_account_effects(
        self,
        account_id: str = Path(..., description="Account address"),
        cursor: Optional[str] = Query(None, description="Paging token of the last effect already seen"),
        order: str = Query('asc', description="Sort order: 'asc' or 'desc'"),
        limit: Optional[int] = Query(None, description="Max effects to return (1-200, default 10)"),
    ) -> EffectsPage:
        """Return a page of effects owned by one account."""
        return await self._list_effects(cursor, order, limit, account_id=account_id)

    async def handle_get_ledger_effects(
        self,
        ledger_id: int = Path(..., description="Ledger sequence"),
        cursor: Optional[str] = Query(None, description="Paging token of the last effect already seen"),
        order: str = Query('asc', description="Sort order: 'asc' or 'desc'"),
        limit: Optional[int] = Query(None, description="Max effects to return (1-200, default 10)"),
    ) -> EffectsPage:
        """Return a page of effects from one ledger."""
        return await self._list_effects(cursor, order, limit, ledger_id=ledger_id)

    async def handle_get_operation_effects(
        self,
        op_id: int = Path(..., description="Operation id"),
        cursor: Optional[str] = Query(None, description="Paging token of the last effect already seen"),
        order: str = Query('asc', description="Sort order: 'asc' or 'desc'"),
        limit: Optional[int] = Query(None, description="Max effects to return (1-200, default 10)"),
    ) -> EffectsPage:
        """Return a page of effects from one operation."""
        return await self._list_effects(cursor, order, limit, operation_id=op_id)

    async def handle_get_transaction_effects(
        self,
        tx_id: str = Path(..., description="Transaction hash (hex)"),
        cursor: Optional[str] = Query(None, description="Paging token of the last effect already seen"),
        order: str = Query('asc', description="Sort order: 'asc' or 'desc'"),
        limit: Optional[int] = Query(None, description="Max effects to return (1-200, default 10)"),
    ) -> EffectsPage:
        """Return a page of effects from one transaction."""
        return await self._list_effects(cursor, order, limit, transaction_hash=tx_id)

    async def handle_get_liquidity_pool_effects(
        self,
        lp_id: str = Path(..., description="Liquidity pool id (hex)"),
        cursor: Optional[str] = Query(None, description="Paging token of the last effect already seen"),
        order: str = Query('asc', description="Sort order: 'asc' or 'desc'"),
        limit: Optional[int] = Query(None, description="Max effects to return (1-200, default 10)"),
    ) -> EffectsPage:
        """Return a page of effects from operations touching one liquidity pool."""
        return await self._list_effects(cursor, order, limit, liquidity_pool_id=lp_id)

    async def _list_effects(
        self,
        cursor: Optional[str],
        order: str,
        limit: Optional[int],
        account_id: Optional[str] = None,
        ledger_id: Optional[int] = None,
        operation_id: Optional[int] = None,
        transaction_hash: Optional[str] = None,
        liquidity_pool_id: Optional[str] = None,
    ) -> EffectsPage:
        """Compose, run and render one effects page.

        All lookups and the final select share one snapshot.

        Raises:
            HTTPException: 400 for bad paging parameters, 404 for unknown
                filter entities, 503 for storage failures.
        """
        logger.info(
            "History._list_effects: cursor=%s, order=%s, limit=%s, account=%s, ledger=%s, "
            "operation=%s, transaction=%s, pool=%s",
            cursor, order, limit, account_id, ledger_id, operation_id, transaction_hash, liquidity_pool_id
        )
        try:
            page = PageQuery.create(cursor, order, limit)
            async with self.read_snapshot() as conn:
                q = HistoryQ(conn).effects()
                if account_id is not None:
                    q = await q.for_account(account_id)
                if ledger_id is not None:
                    q = await q.for_ledger(ledger_id)
                if operation_id is not None:
                    q = q.for_operation(operation_id)
                if transaction_hash is not None:
                    q = await q.for_transaction(transaction_hash)
                if liquidity_pool_id is not None:
                    q = await q.for_liquidity_pool(page, liquidity_pool_id)
                effects = await q.page(page).select()
            items: List[EffectItem] = [EffectItem.from_effect(effect) for effect in effects]
        except (InvalidOrder, MalformedCursor, InvalidLimit) as e:
            logger.warning(f"History._list_effects: Rejected request: {e}")
            raise HTTPException(status_code=400, detail=str(e))
        except NotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        except (LookupFailed, StorageError) as e:
            logger.error(f"History._list_effects: Storage error: {e}", exc_info=True)
            raise HTTPException(status_code=503, detail="Database error while fetching effects")
        except DetailsDecodeError as e:
            logger.error(f"History._list_effects: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Stored effect details are corrupt")

        next_cursor = items[-1].paging_token if items else None
        logger.info(f"History._list_effects: Returning {len(items)} effects (next_cursor={next_cursor}).")
        return EffectsPage(items=items, limit=page.limit, order=page.order, next_cursor=next_cursor)
