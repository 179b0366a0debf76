# =============================================================================
# axel/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the AXEL HTTP server.
# It builds the FastAPI application with the ordered middleware stack,
# the health router, the 404 fallback and the generic error handler.
#
# Usage:
#   uvicorn axel.main:app
#   axel    (console script, see axel/server.py)
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

from axel import __version__
from axel.config import Settings, get_settings
from axel.exceptions import internal_exception_handler, not_found_response
from axel.logging_config import configure_logging
from axel.middleware import build_middleware
from axel.routers import health

logger = logging.getLogger(__name__)

# Statuses the router raises when no route accepts the request
UNMATCHED_ROUTE_STATUSES = (404, 405)


def _request_url(request: Request) -> str:
    url = request.url.path
    if request.url.query:
        url += f"?{request.url.query}"
    return url


async def route_not_found_handler(request: Request, exc: StarletteHTTPException):
    """
    Fallback for requests no route accepts.

    Unknown paths and wrong methods on known paths both answer 404.
    Any other HTTP exception keeps FastAPI's default handling.
    """
    if exc.status_code not in UNMATCHED_ROUTE_STATUSES:
        return await http_exception_handler(request, exc)
    logger.info(f"Route not found: {request.method} {_request_url(request)}")
    return not_found_response()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Frozen settings for this process. Read from the
            environment when omitted.

    Returns:
        The configured FastAPI application
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Logs readiness on startup and a final line on shutdown.
        """
        logger.info(f"Server is running on port {settings.PORT}")
        logger.info(f"Environment: {settings.NODE_ENV}")
        logger.debug(f"CORS origins: {settings.allowed_origins_list}")

        yield

        logger.info("Shutting down server")

    app = FastAPI(
        title="AXEL Server",
        version=__version__,
        # No docs or schema routes: everything but /health is a 404
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
        middleware=build_middleware(settings),
    )
    app.state.settings = settings

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    app.add_exception_handler(StarletteHTTPException, route_not_found_handler)
    # Last resort for anything that escapes the middleware stack
    app.add_exception_handler(Exception, internal_exception_handler)

    # =========================================================================
    # Routers
    # =========================================================================

    app.include_router(health.router, tags=["Health"])

    return app


# ASGI entrypoint (uvicorn: `uvicorn axel.main:app`)
configure_logging(get_settings())
app = create_app()
