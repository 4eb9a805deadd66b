"""FastAPI application factory with lifespan context manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import BadgeError
from app.logging_config import configure_logging
from app.routers import health, pubsub


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and select the storage backend."""
    configure_logging(
        json_logs=not settings.debug,
        log_level=settings.log_level,
        service=settings.app_name,
    )

    if settings.storage_backend == "gcs":
        from app.dependencies import init_production_deps

        init_production_deps()

    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)


@app.exception_handler(BadgeError)
async def badge_error_handler(request: Request, exc: BadgeError) -> JSONResponse:
    """Return a JSON 500 naming the error kind for badge handling failures."""
    logger = structlog.get_logger()
    logger.error(
        "badge_event_failed",
        error_type=type(exc).__name__,
        error=str(exc),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for any unhandled exception."""
    logger = structlog.get_logger()
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(health.router)
app.include_router(pubsub.router)
