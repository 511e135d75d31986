"""Request ID middleware — unique ID per request for tracing.

Learn: Every request gets an ID, either from the incoming X-Request-ID
header (when it is a plain token of at most 128 chars) or a fresh UUID.
The ID is bound to structlog's contextvars so every log line emitted
while handling the request carries it, and it's
echoed back in the response header. One `request.completed` line per
request records method, path, status, and duration.
"""

import re
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

# Path prefixes whose trailing segment is a bearer capability.
REDACTED_PREFIXES = ("/api/share/",)

# A client-supplied ID must be a short plain token, otherwise a fresh UUID is used.
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,128}")


def loggable_path(path: str) -> str:
    for prefix in REDACTED_PREFIXES:
        if path.startswith(prefix):
            return prefix + "{token}"
    return path


def resolve_request_id(header_value: str | None) -> str:
    if header_value and REQUEST_ID_PATTERN.fullmatch(header_value):
        return header_value
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID and log its outcome."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = resolve_request_id(request.headers.get("X-Request-ID"))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        logger.info(
            "request.completed",
            method=request.method,
            path=loggable_path(request.url.path),
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response
