"""
Main entrypoint for the Student Records API.

This module assembles the FastAPI application: it sets up logging,
builds the single storage adapter chosen by configuration, wraps it in
a ``StudentService`` stored on ``app.state`` and mounts the routers
under ``/api``.  ``app`` is created at import time so it can be served
directly::

    uvicorn student_records_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.errors import add_error_handlers
from .api.middleware import TimingMiddleware
from .api.router import router as api_router
from .core.config import Settings, settings as default_settings
from .core.logging_config import setup_logging
from .services.student_service import StudentService
from .storage import StorageAdapter, create_storage

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[StorageAdapter] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the module-level settings
        read from the environment.
    storage : Optional[StorageAdapter]
        An already built adapter.  When omitted the adapter is built
        by ``create_storage`` from ``settings``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)

    if storage is None:
        storage = create_storage(settings)
    service = StudentService(storage)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("%s started in %s mode", settings.project_name, service.mode)
        yield
        storage.close()

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.student_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(TimingMiddleware)
    add_error_handlers(app)

    app.include_router(api_router, prefix="/api")
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
