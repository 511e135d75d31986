"""CORS middleware — the first stage of the request gate.

Learn: The frontend is a single known origin that sends the session
cookie with credentials, so "*" is not an option. When the Origin
header matches settings.frontend_origin exactly, the response gets
credentialed CORS headers for that origin. Every OPTIONS request is
answered right here with 204, before routing or auth, so preflights
never need a session.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

ALLOW_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
ALLOW_HEADERS = "Content-Type"


class CORSMiddleware(BaseHTTPMiddleware):
    """Credentialed CORS for one allowed origin."""

    def __init__(self, app, allowed_origin: str = ""):
        super().__init__(app)
        self.allowed_origin = allowed_origin

    def cors_headers(self, request: Request) -> dict[str, str]:
        origin = request.headers.get("Origin")
        if not self.allowed_origin or origin != self.allowed_origin:
            return {}
        return {
            "Access-Control-Allow-Origin": self.allowed_origin,
            "Vary": "Origin",
            "Access-Control-Allow-Credentials": "true",
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
            "Access-Control-Allow-Methods": ALLOW_METHODS,
        }

    async def dispatch(self, request: Request, call_next) -> Response:
        headers = self.cors_headers(request)

        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)

        response: Response = await call_next(request)
        for name, value in headers.items():
            response.headers[name] = value
        return response
