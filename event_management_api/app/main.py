"""
Main entrypoint for the Event Management API.

This module assembles the FastAPI application, sets up logging,
registers the exception handlers that turn errors into JSON bodies and
includes the API router.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``, e.g.::

    uvicorn event_management_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.router import router as api_router
from .core.config import settings
from .core.db import init_db
from .core.errors import ApiError, ValidationError
from .core.logging_config import setup_logging
from .core.middleware import RequestLogMiddleware

logger = logging.getLogger(__name__)


def validation_errors_by_field(exc: RequestValidationError) -> dict:
    """Group pydantic errors into ``{field: [messages]}``.

    The field is the last element of the error location (``body`` for
    errors about the body as a whole).
    """
    errors: dict = {}
    for error in exc.errors():
        loc = error.get("loc") or ("body",)
        field = str(loc[-1])
        message = error.get("msg", "Invalid value.")
        if error.get("type") == "value_error" and error.get("ctx", {}).get("error"):
            # Drop pydantic's "Value error, " prefix for our own messages.
            message = str(error["ctx"]["error"])
        errors.setdefault(field, []).append(message)
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = ValidationError(validation_errors_by_field(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception on %s %s",
            request.method, request.url.path,
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"message": "Server Error"})


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Apply migrations at startup.  This creates the database file if it
    # does not exist and brings the schema up to date.
    init_db()
    logger.info("%s %s started", settings.project_name, settings.api_version)
    yield
    logger.info("%s shutting down", settings.project_name)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Configures logging, middleware, exception handlers and routes, and
    returns a FastAPI instance ready to be served.
    """
    # Logging first so that everything below can log.
    setup_logging()

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.add_middleware(RequestLogMiddleware)
    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
