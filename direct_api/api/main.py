"""FastAPI application for the Direct API.

Provides the main application instance with routers, middleware,
and exception handlers configured.
"""

import logging
import sys
import time as _time
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from direct_api.config import get_config

_config = get_config()

# Configure logging to stdout for uvicorn to capture
logging.basicConfig(
    level=_config.logging.level.upper(),
    format=_config.logging.format,
    handlers=[logging.StreamHandler(sys.stdout)],
)
logging.getLogger("direct_api").setLevel(_config.logging.level.upper())

from direct_api.api.auth import maybe_require_api_key  # noqa: E402
from direct_api.api.routes import challenges  # noqa: E402
from direct_api.db.connection import init_db  # noqa: E402
from direct_api.errors import DirectAPIError  # noqa: E402

logger = logging.getLogger(__name__)

_startup_time: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup."""
    global _startup_time
    _startup_time = _time.time()
    init_db()
    logger.info("Direct API started")
    yield
    logger.info("Direct API stopped")


app = FastAPI(
    title="Direct API",
    description="Read-only listing of the challenges a user can access",
    version="0.1.0",
    lifespan=lifespan,
)

# Optional API auth for /api/* when an API key is configured.
app.middleware("http")(maybe_require_api_key)


@app.exception_handler(DirectAPIError)
async def direct_api_error_handler(request: Request, exc: DirectAPIError) -> JSONResponse:
    """Handle DirectAPIError exceptions with consistent format.

    Args:
        request: The incoming request.
        exc: The DirectAPIError exception.

    Returns:
        JSONResponse carrying the error's HTTP status and details.
    """
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


# Include routers
app.include_router(challenges.router, prefix="/api/v1")


@app.get("/health")
def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with health status, version and uptime.
    """
    uptime = int(_time.time() - _startup_time) if _startup_time else 0
    try:
        version = _pkg_version("direct-api")
    except PackageNotFoundError:
        version = "unknown"
    return {"status": "healthy", "version": version, "uptime_seconds": uptime}
