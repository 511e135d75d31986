"""Session cookie contract.

The token rides in an HttpOnly, SameSite=Lax cookie scoped to "/". Its
Max-Age matches the session TTL, so the browser forgets the cookie at
about the time the server stops honouring it.
"""

from starlette.requests import Request
from starlette.responses import Response

from notevault.config import settings


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=int(settings.session_ttl.total_seconds()),
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )


def clear_session_cookie(response: Response) -> None:
    """Max-Age=0 tells the browser to drop the cookie immediately."""
    response.set_cookie(
        key=settings.cookie_name,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )


def read_session_cookie(request: Request) -> str | None:
    token = request.cookies.get(settings.cookie_name, "").strip()
    return token or None
