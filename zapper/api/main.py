"""FastAPI application for the zapper.

Note: authentication of the `caller` field is left to the infrastructure
layer in front of this service; the zapper only checks that the named
caller is authorized.
"""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from zapper import __version__
from zapper.api.endpoints import router
from zapper.errors import (
    ExternalCallFailure,
    InsufficientObservations,
    NoElapsedWindow,
    Unauthorized,
    ZapError,
)
from zapper.models.api import ErrorResponse

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("ZAPPER_HOST", "0.0.0.0")
PORT = int(os.environ.get("ZAPPER_PORT", "8000"))
DEBUG = os.environ.get("ZAPPER_DEBUG", "false").lower() in ("true", "1", "yes")

logger = structlog.get_logger()

app = FastAPI(
    title="Zapper",
    description="Single-asset deposits into a three-asset stable pool",
    version=__version__,
)

ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    status: {"model": ErrorResponse} for status in (400, 403, 409, 502)
}

app.include_router(router, responses=ERROR_RESPONSES)


def status_for(error: ZapError) -> int:
    """HTTP status for a zap error."""
    if isinstance(error, Unauthorized):
        return 403
    if isinstance(error, ExternalCallFailure):
        return 502
    if isinstance(error, InsufficientObservations | NoElapsedWindow):
        return 409
    return 400


@app.exception_handler(ZapError)
async def zap_error_handler(request: Request, exc: ZapError) -> JSONResponse:
    status = status_for(exc)
    logger.warning(
        "request_failed",
        path=request.url.path,
        error=type(exc).__name__,
        detail=str(exc),
        status=status,
    )
    return JSONResponse(
        status_code=status,
        content=ErrorResponse(error=type(exc).__name__, detail=str(exc)).model_dump(),
    )


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def configure_logging(debug: bool = DEBUG) -> None:
    """Console structlog output at INFO (DEBUG when `debug`)."""
    level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def run() -> None:
    """Run the zapper API server.

    Configuration via environment variables:
    - ZAPPER_HOST: Host to bind to (default: 0.0.0.0)
    - ZAPPER_PORT: Port to bind to (default: 8000)
    - ZAPPER_DEBUG: Enable debug logging and reload (default: false)
    """
    configure_logging()
    uvicorn.run(
        "zapper.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
