"""Entry point for the CastMe API server.

Serves ``castme_api.app.main:app`` with Uvicorn.  Host and port come
from the ``HOST`` and ``PORT`` environment variables (see
``castme_api.app.core.config``).  Defaults are ``0.0.0.0`` and ``5000``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from castme_api.app.core.config import settings
from castme_api.app.main import app


async def main() -> None:
    """Start the API using Uvicorn."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Server stopped")
