# =============================================================================
# axel/middleware/errors.py - Error Handling Stage
# =============================================================================
# Catches anything raised by the stages below it (body parsing, routing,
# route handlers) and turns it into the generic 500 response. Sitting inside
# the security headers and CORS stages means error responses still get
# those headers.
# =============================================================================

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from axel.exceptions import internal_error_response, log_server_error


class ErrorHandlerMiddleware:
    """
    Pure ASGI middleware; one response per request, even on failure.

    If the downstream app fails after it already started the response there
    is nothing left to send, so the exception is re-raised to the server.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            log_server_error(exc)
            if response_started:
                raise
            response = internal_error_response()
            await response(scope, receive, send)
