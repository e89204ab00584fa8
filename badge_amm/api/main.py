"""FastAPI application for the badge market.

Market errors are mapped to HTTP status codes here; endpoints let them
propagate.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from badge_amm import __version__
from badge_amm.api.endpoints import router
from badge_amm.errors import (
    AuthorizationError,
    BadgeMarketError,
    DuplicateCreatorError,
    PausedError,
    PremintRequiredError,
    ReentrantCallError,
    UnknownPoolError,
)
from badge_amm.logging_config import configure_logging
from badge_amm.safe_int import SafeIntError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("BADGE_HOST", "0.0.0.0")
PORT = int(os.environ.get("BADGE_PORT", "8000"))
DEBUG = os.environ.get("BADGE_DEBUG", "false").lower() in ("true", "1", "yes")

# First match wins; anything else is a 422
ERROR_STATUS: list[tuple[type[BadgeMarketError], int]] = [
    (UnknownPoolError, 404),
    (AuthorizationError, 403),
    (PremintRequiredError, 403),
    (PausedError, 403),
    (DuplicateCreatorError, 409),
    (ReentrantCallError, 409),
]

app = FastAPI(
    title="Badge Market",
    description="Quadratic bonding-curve pools for tiered badges",
    version=__version__,
)

app.include_router(router)


def status_for(error: BadgeMarketError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 422


@app.exception_handler(BadgeMarketError)
async def market_error_handler(request: Request, exc: BadgeMarketError) -> JSONResponse:
    status = status_for(exc)
    logger.info(
        "request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        status=status,
    )
    return JSONResponse(status_code=status, content={"detail": str(exc), "error": type(exc).__name__})


@app.exception_handler(SafeIntError)
async def arithmetic_error_handler(request: Request, exc: SafeIntError) -> JSONResponse:
    logger.warning("arithmetic_error", path=request.url.path, error=type(exc).__name__)
    return JSONResponse(status_code=422, content={"detail": str(exc), "error": type(exc).__name__})


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the badge market API server.

    Configuration via environment variables:
    - BADGE_HOST: Host to bind to (default: 0.0.0.0)
    - BADGE_PORT: Port to bind to (default: 8000)
    - BADGE_DEBUG: Enable debug/reload mode (default: false)
    """
    configure_logging(verbose=DEBUG)
    uvicorn.run(
        "badge_amm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
