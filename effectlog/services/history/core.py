"""History service core: read-only effect listings."""

from typing import Optional
import asyncpg

from effectlog.lib.common.database_handler import DatabaseHandler
from effectlog.lib.common.api_handler import APIHandler
from effectlog.services.history.handlers import EffectHandlersMixin
from effectlog.services.history.schemas import EffectsPage

import logging
logger = logging.getLogger(__name__)


class History(EffectHandlersMixin, DatabaseHandler, APIHandler):
    """Serve paginated views of the effect log."""
    name = "History"

    def __init__(
            self,
            dsn: str | None = None,
            pool: Optional[asyncpg.Pool] = None,
            api_host: str = '0.0.0.0',
            api_port: int = 8080) -> None:
        """Create a History instance.

        Args:
            dsn (str | None): Database DSN for internal pool creation.
            pool (asyncpg.Pool | None): Existing pool to reuse.
            api_host (str): Host interface for the API.
            api_port (int): Port number for the API.
        """

        # Initialize Supers
        DatabaseHandler.__init__(self, dsn=dsn, pool=pool)
        APIHandler.__init__(self, api_host=api_host, api_port=api_port)

    def _setup_routes(self) -> None:
        """Define API routes for History."""
        logger.info("History: Setting up API routes")

        routes = [
            ('/api/effects', self.handle_get_effects),
            ('/api/accounts/{account_id}/effects', self.handle_get_account_effects),
            ('/api/ledgers/{ledger_id}/effects', self.handle_get_ledger_effects),
            ('/api/operations/{op_id}/effects', self.handle_get_operation_effects),
            ('/api/transactions/{tx_id}/effects', self.handle_get_transaction_effects),
            ('/api/liquidity_pools/{lp_id}/effects', self.handle_get_liquidity_pool_effects),
        ]
        for path, endpoint in routes:
            self._api_app.router.add_api_route(
                path,
                endpoint,
                methods=['GET'],
                response_model=EffectsPage
            )

    async def start(self) -> None:
        """
        Start History.
        """
        # Start Database
        await self.init_pool()

        # Start API
        await self.start_api_server()

    async def stop(self) -> None:
        """
        Stop History.
        """
        # Stop API
        await self.stop_api_server()

        # Stop Database
        await self.close_pool()
