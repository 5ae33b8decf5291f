"""
Main entrypoint for the Customer Records API.

This module assembles the FastAPI application, sets up logging,
registers the error handler and includes the versioned router.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn customer_records_api.app.main:app --reload

The connection pool is created when the application starts, the
schema is applied to it, and it is closed on shutdown.
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from .api.v1.router import router as v1_router
from .core.config import Settings, settings
from .core.db import ConnectionPool, init_db
from .core.errors import RecordServiceError
from .core.logging_config import setup_logging


async def record_service_error_handler(request: Request, exc: RecordServiceError) -> JSONResponse:
    """Answer with the error's status and public message; log the internals."""
    logger = logging.getLogger(__name__)
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(level, "%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    """Answer 422 with the validation errors as ASCII-escaped JSON.

    The errors echo the rejected input, which may hold text (such as a
    lone surrogate) that cannot be encoded as UTF-8.
    """
    logging.getLogger(__name__).info("%s %s rejected: invalid request", request.method, request.url.path)
    body = json.dumps({"detail": jsonable_encoder(exc.errors())}, ensure_ascii=True)
    return Response(content=body, status_code=422, media_type="application/json")


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to build the app with.  Defaults to the module-level
        ``settings`` read from the environment.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or settings
    # Initialise logging before anything else so that startup can log.
    setup_logging(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        pool = ConnectionPool.from_settings(app_settings)
        try:
            init_db(pool)
            app.state.pool = pool
            logging.getLogger(__name__).info("Record store ready at %s", pool.database_path)
            yield
        finally:
            pool.close()

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.api_version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.add_exception_handler(RecordServiceError, record_service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.include_router(v1_router, prefix=app_settings.api_prefix)
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
