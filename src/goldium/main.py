"""Main entry point - serves the wallet API."""

import asyncio
import logging
import signal

import uvicorn

from goldium.api.app import create_app
from goldium.config import get_settings
from goldium.services.wallet import build_wallet

logger = logging.getLogger(__name__)


class Application:
    """Owns the wallet services and the uvicorn server serving them."""

    def __init__(self):
        self.settings = get_settings()
        self.server = None

    def _configure_logging(self):
        log_level = logging.DEBUG if self.settings.debug else logging.INFO
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        # httpx logs every RPC request at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)

    async def start(self):
        """Build the wallet and serve until shutdown."""
        self._configure_logging()

        logger.info("Starting Goldium...")
        logger.info(f"Environment: {self.settings.environment}")
        logger.info(f"Primary RPC: {self.settings.solana_rpc_url}")
        logger.info(f"Treasury: {self.settings.treasury_address}")

        if self.settings.is_production and not self.settings.embedded_wallet_secret:
            logger.warning(
                "EMBEDDED_WALLET_SECRET not set - embedded wallet key is ephemeral "
                "and funds sent to it are lost on restart"
            )

        wallet = build_wallet(self.settings)
        config = uvicorn.Config(
            create_app(wallet=wallet),
            host=self.settings.api_host,
            port=self.settings.api_port,
            log_level="debug" if self.settings.debug else "info",
        )
        self.server = uvicorn.Server(config)
        logger.info(f"Serving wallet API on {self.settings.api_host}:{self.settings.api_port}")

        try:
            await self.server.serve()
        except asyncio.CancelledError:
            logger.info("API server cancelled")

    def shutdown(self):
        """Ask uvicorn to exit; the app lifespan closes RPC clients."""
        logger.info("Shutdown requested")
        if self.server:
            self.server.should_exit = True


def main():
    """Main entry point."""
    app = Application()

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, app.shutdown)

    try:
        loop.run_until_complete(app.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        loop.close()


if __name__ == "__main__":
    main()
