# =============================================================================
# axel/middleware/ - Request Pipeline Stages
# =============================================================================
# This package contains the ordered request stages:
# - security.py: Security response headers
# - cors.py: CORS allow-list with pass-through preflight
# - errors.py: Generic 500 handling for everything below it
# - body.py: Body size limit and JSON / URL-encoded parsing
#
# build_middleware() returns the stages outermost first, the order FastAPI
# applies a `middleware=[...]` list in.
# =============================================================================

from starlette.middleware import Middleware

from axel.config import Settings
from axel.middleware.body import BodyParserMiddleware
from axel.middleware.cors import PassThroughCORSMiddleware
from axel.middleware.errors import ErrorHandlerMiddleware
from axel.middleware.security import SecurityHeadersMiddleware

CORS_ALLOW_METHODS = ["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"]


def build_middleware(settings: Settings) -> list[Middleware]:
    """
    Build the request pipeline for the given settings.

    Order (outermost first):
    1. Security headers
    2. CORS
    3. Error handler
    4. Body parser
    """
    return [
        Middleware(SecurityHeadersMiddleware),
        Middleware(
            PassThroughCORSMiddleware,
            allow_origins=settings.allowed_origins_list,
            allow_credentials=True,
            allow_methods=CORS_ALLOW_METHODS,
            allow_headers=["*"],
        ),
        Middleware(ErrorHandlerMiddleware),
        Middleware(BodyParserMiddleware, max_body_size=settings.max_body_size_bytes),
    ]


__all__ = [
    "BodyParserMiddleware",
    "ErrorHandlerMiddleware",
    "PassThroughCORSMiddleware",
    "SecurityHeadersMiddleware",
    "build_middleware",
]
