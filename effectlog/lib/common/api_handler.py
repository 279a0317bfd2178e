"""FastAPI base for read-only effectlog services, with uvicorn lifecycle."""

from typing import List, Optional
from abc import ABC, abstractmethod
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import asyncio
import os

import logging
logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000"


def cors_origins_from_env() -> List[str]:
    """Origins allowed to read the API, from comma-separated ``CORS_ORIGINS``.

    Blank entries are dropped, so a trailing comma is harmless.
    """
    raw = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class APIHandler(ABC):
    """Own the FastAPI app of a read-only service and run it under uvicorn.

    Subclasses register their GET routes in ``_setup_routes``. Browsers may
    only issue GETs, without credentials.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name used in the API title and log lines."""
        ...

    def __init__(
            self,
            api_host: str = '0.0.0.0',
            api_port: int = 8080) -> None:
        """Build the app and register routes.

        Args:
            api_host (str): Interface uvicorn binds to.
            api_port (int): Port uvicorn listens on; 0 picks a free one.
        """

        # API Server
        self._api_host = api_host
        self._api_port = api_port
        self._api_app = FastAPI(title=f"{self.name} API")
        self._server: Optional[uvicorn.Server] = None
        self._server_task: Optional[asyncio.Task] = None

        cors_origins = cors_origins_from_env()
        logger.debug(f"{self.name}: CORS origins {cors_origins}")
        self._api_app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=False,
            allow_methods=["GET"],
            allow_headers=["*"],
        )

        self._setup_routes()

    @abstractmethod
    def _setup_routes(self) -> None:
        """Register GET routes on ``self._api_app``."""
        pass

    async def start_api_server(self) -> None:
        """Serve the app from a background task."""
        config = uvicorn.Config(
            self._api_app,
            host=self._api_host,
            port=self._api_port,
            log_level="info",
            access_log=False,
        )
        self._server = uvicorn.Server(config)
        self._server_task = asyncio.create_task(self._server.serve())
        logger.info(f"{self.name}: serving effects on http://{self._api_host}:{self._api_port}")

    async def stop_api_server(self) -> None:
        """Ask uvicorn to exit and wait up to five seconds for in-flight reads."""
        if self._server is None:
            return
        self._server.should_exit = True
        if self._server_task:
            try:
                await asyncio.wait_for(self._server_task, timeout=5.0)
            except asyncio.TimeoutError:
                logger.warning(f"{self.name}: API did not shut down within 5s")
            finally:
                self._server_task = None
        logger.info(f"{self.name}: API stopped")
