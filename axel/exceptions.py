# =============================================================================
# axel/exceptions.py - Error Types and Error Responses
# =============================================================================
# Centralized error handling for the HTTP pipeline.
# Clients only ever see the two generic messages below; everything else
# (error codes, sizes, parser messages, tracebacks) goes to the server log.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Route not found"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class AxelException(Exception):
    """
    Base exception for errors raised inside the request pipeline.

    status_code is what the failure would map to on its own. It is logged
    but not sent: every pipeline error answers with a generic 500.
    """

    def __init__(
        self,
        message: str,
        code: str = "AXEL_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dict for log context."""
        result = {
            "detail": self.message,
            "code": self.code,
            "status_code": self.status_code,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Body Parsing Exceptions
# =============================================================================

class PayloadTooLargeError(AxelException):
    """Raised when a request body exceeds the configured size limit."""

    def __init__(self, limit: int, received: int | None = None):
        details: dict[str, Any] = {"limit": limit}
        if received is not None:
            details["received"] = received
        super().__init__(
            message="request entity too large",
            code="PAYLOAD_TOO_LARGE",
            status_code=413,
            details=details,
        )


class MalformedBodyError(AxelException):
    """Raised when a JSON or URL-encoded body cannot be decoded."""

    def __init__(self, content_type: str, error: str):
        super().__init__(
            message=f"Failed to parse {content_type} body: {error}",
            code="MALFORMED_BODY",
            status_code=400,
            details={"content_type": content_type, "error": error},
        )


# =============================================================================
# Responses
# =============================================================================

def not_found_response() -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"success": False, "message": NOT_FOUND_MESSAGE},
    )


def internal_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": INTERNAL_ERROR_MESSAGE},
    )


def log_server_error(exc: Exception) -> None:
    """
    Record a pipeline failure.

    Known pipeline errors are logged without a traceback; anything else
    is logged with one.
    """
    if isinstance(exc, AxelException):
        logger.error(f"Server error: {exc.message} ({exc.to_dict()})")
    else:
        logger.exception(f"Server error: {exc}")


# =============================================================================
# Exception Handlers
# =============================================================================

async def internal_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Convert any exception to the generic 500 response.

    Registered on the app for Exception, so it also covers failures that
    escape the error handling middleware.
    """
    log_server_error(exc)
    return internal_error_response()
