"""
StreamGuide Main Application

FastAPI application entry point for the channel scheduling service.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from streamguide import __version__
from streamguide.api.schemas import ErrorResponse
from streamguide.config import load_config
from streamguide.database import close_db, init_db
from streamguide.errors import (
    DayFullError,
    InvalidInputError,
    NotFoundError,
    OverflowWarning,
    ScheduleError,
    StorageError,
)

# Logger
logger = logging.getLogger(__name__)

# Error class -> HTTP status, most specific first
ERROR_STATUS = [
    (DayFullError, status.HTTP_409_CONFLICT),
    (OverflowWarning, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown tasks:
    - Load configuration
    - Initialize database
    """
    # Startup
    logger.info(f"Starting StreamGuide v{__version__}")

    config = load_config()
    logger.info(f"Configuration loaded, server port: {config.server.port}")

    await init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down StreamGuide")
    await close_db()
    logger.info("StreamGuide shutdown complete")


async def schedule_error_handler(request: Request, exc: ScheduleError) -> JSONResponse:
    """Map scheduling errors to HTTP responses."""
    status_code = status.HTTP_400_BAD_REQUEST
    for error_class, code in ERROR_STATUS:
        if isinstance(exc, error_class):
            status_code = code
            break

    if isinstance(exc, StorageError):
        logger.error(
            f"Storage error on {request.method} {request.url.path}: {exc.message} "
            f"(failed ids: {exc.failed_ids})"
        )
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                detail="The schedule could not be saved. Please try again.",
                error=type(exc).__name__,
                details={"failed_ids": exc.failed_ids},
            ).model_dump(),
        )

    logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            detail=exc.message,
            error=type(exc).__name__,
            details=exc.details,
        ).model_dump(),
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="StreamGuide",
        description="TV guide and broadcast-day scheduling for video channels",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_exception_handler(ScheduleError, schedule_error_handler)

    # Register API routers
    from streamguide.api import api_router
    app.include_router(api_router)

    return app


app = create_app()


def main() -> None:
    """
    Main entry point for running the server.

    Called by the `streamguide` console script.
    """
    import uvicorn

    from streamguide.utils.logging_setup import parse_size, setup_logging

    config = load_config()

    setup_logging(
        log_level=config.logging.level,
        log_file_name=config.logging.file,
        log_to_console=True,
        log_to_file=True,
        max_bytes=parse_size(config.logging.max_size),
        backup_count=config.logging.backup_count,
        log_format=config.logging.format,
    )

    logger.info(f"Starting StreamGuide v{__version__}")

    uvicorn.run(
        "streamguide.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
        log_level=config.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()
