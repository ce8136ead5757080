"""
Main entrypoint for the CastMe API.

This module assembles the FastAPI application, sets up logging, maps
service errors to HTTP responses and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn castme_api.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.errors import LogicError
from .core.logging_config import setup_logging
from .core.validation import error_from_request

logger = logging.getLogger(__name__)


async def logic_error_handler(request: Request, exc: LogicError) -> JSONResponse:
    """Answer a service failure with its status code and message."""
    logger.warning(
        "%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.kind
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind},
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer a malformed request body like the matching service failure."""
    return await logic_error_handler(request, error_from_request(exc.errors()))


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Configures logging, registers the service error handler and
    includes the versioned API routers.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.add_exception_handler(LogicError, logic_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Mount versioned routes under /api/v1.
    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file if needed and applies migrations.
        init_db()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
