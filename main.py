"""
EventHub API - Main entry point.

Serves the REST API for the event-management client.
"""

import asyncio
import logging
import signal
import sys
from aiohttp import web

from config.settings import settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("eventhub.log", encoding="utf-8"),
    ],
)
logger = logging.getLogger(__name__)

# Set DEBUG level only for our app loggers, not for noisy libraries
if settings.debug:
    for name in ['adapters', 'core', 'infrastructure', '__main__']:
        logging.getLogger(name).setLevel(logging.DEBUG)
    # Silence noisy HTTP debug logs
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('hpack').setLevel(logging.WARNING)


async def run_web_server() -> web.AppRunner:
    """Start the API on settings.port and return its runner."""
    from adapters.api import create_api_app
    from adapters.api.loader import auth_service, event_service

    app = create_api_app(auth_service, event_service, frontend_url=settings.frontend_url)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "0.0.0.0", settings.port)
    await site.start()
    logger.info(f"🚀 Server on http://localhost:{settings.port}")
    return runner


async def main():
    """Main function - starts the API and waits for a stop signal."""
    logger.info("=== EventHub API Starting ===")
    logger.info(f"  env: {settings.env}")
    logger.info(f"  db_backend: {settings.db_backend}")
    logger.info(f"  frontend_url: {settings.frontend_url}")

    if not settings.jwt_secret:
        logger.error("JWT_SECRET is not set! Tokens cannot be signed.")
        sys.exit(1)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows: fall back to KeyboardInterrupt
            pass

    runner = await run_web_server()
    try:
        await stop.wait()
    finally:
        await runner.cleanup()
        logger.info("Server stopped.")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Server stopped by user (Ctrl+C)")
    except SystemExit as e:
        sys.exit(e.code)
