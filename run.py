"""Entry point for serving the Customer Records API.

Host and port are read from the ``HOST`` and ``PORT`` environment
variables through the application settings.  Defaults are
``0.0.0.0`` and ``3000``.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from customer_records_api.app.core.config import settings
from customer_records_api.app.main import app


async def main() -> None:
    """Serve the API with uvicorn until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        # Logging and levels come from create_app; uvicorn reuses them.
        log_config=None,
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
