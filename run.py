"""Entry point for the Finance Tracker API server.

Serves ``finance_tracker_api.app.main:app`` with Uvicorn.  It is
intended to be executed from the project root, for example under Docker,
where you only specify a single Python file to run.

Configuration such as SECRET_KEY, DATABASE_URL and CORS_ORIGINS is read
from environment variables (see ``finance_tracker_api/app/core/config.py``).

Usage:
    python run.py
"""
import asyncio
import os

from uvicorn import Config, Server

from finance_tracker_api.app.main import app
from finance_tracker_api.app.core.config import settings


async def run_api() -> None:
    """Start the API using Uvicorn.

    Host and port are read from environment variables `API_HOST` and
    `API_PORT`. Defaults are `0.0.0.0` and `8000`.
    """
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
