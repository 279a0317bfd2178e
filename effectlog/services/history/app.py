"""Entrypoint script to start the History service."""

import asyncio, os, logging
from effectlog.services.history import History

level = os.getenv("LOGLEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, level, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

async def main():
    """Bootstrap the History service and block until shutdown."""
    # Load Environment
    dsn = os.environ["DSN"]
    api_host = os.getenv("API_HOST", "0.0.0.0")
    api_port = int(os.getenv("API_PORT", "8080"))

    hist = History(dsn=dsn, api_host=api_host, api_port=api_port)
    await hist.start()

    logging.info("History started → %s:%s", api_host, api_port)
    try:
        await asyncio.Event().wait()              # keep running
    finally:
        await hist.stop()
        logging.info("History stopped")

def run():
    """Console script entrypoint."""
    asyncio.run(main())

if __name__ == "__main__":
    run()
