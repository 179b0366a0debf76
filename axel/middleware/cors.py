# =============================================================================
# axel/middleware/cors.py - CORS Stage
# =============================================================================
# Starlette's CORSMiddleware with a pass-through preflight: origins outside
# the allow-list are never rejected, they just get no Access-Control-Allow-*
# headers and the browser enforces the policy.
# =============================================================================

from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers
from starlette.responses import Response


class PassThroughCORSMiddleware(CORSMiddleware):
    """
    Answers every preflight with 204 No Content.

    Listed origins get the usual allow headers (origin, credentials,
    methods, requested headers). Unlisted origins get only `Vary: Origin`.
    Requested methods and headers are not validated.
    """

    def preflight_response(self, request_headers: Headers) -> Response:
        origin = request_headers["Origin"]

        if not self.is_allowed_origin(origin=origin):
            return Response(status_code=204, headers={"Vary": "Origin"})

        headers = dict(self.preflight_headers)
        if self.preflight_explicit_allow_origin:
            headers["Access-Control-Allow-Origin"] = origin

        requested_headers = request_headers.get("access-control-request-headers")
        if self.allow_all_headers and requested_headers is not None:
            headers["Access-Control-Allow-Headers"] = requested_headers

        return Response(status_code=204, headers=headers)
