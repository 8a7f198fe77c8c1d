"""
Main entrypoint for the Finance Tracker API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  ``create_app`` builds and configures the
app, which is then instantiated at module import time as ``app`` so it
can be served directly, e.g.::

    uvicorn finance_tracker_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.logging_config import setup_logging
from .api.v1.router import router as v1_router
from .core.db import init_db


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Creates the database file if needed and applies pending migrations.
    init_db()
    logging.getLogger(__name__).info("%s %s started", settings.project_name, settings.api_version)
    yield


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Configures logging first so that everything imported afterwards can
    log, then mounts the v1 router under ``/api/v1`` and, if
    ``CORS_ORIGINS`` is set, the CORS middleware.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    if settings.cors_origin_list:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origin_list,
            allow_credentials=True,
            allow_methods=["GET", "OPTIONS", "POST", "PATCH", "DELETE"],
            allow_headers=["Origin", "Content-Type", "Authorization"],
        )

    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()
