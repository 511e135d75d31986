"""FastAPI auth dependencies — the session and admin stages of the request gate.

Learn: These are used as Depends() in routers and handlers. FastAPI
caches a dependency per request, so a router-level
Depends(require_session) and a handler parameter asking for the same
dependency resolve the cookie only once.

Order of the gate:
1. CORS middleware (notevault.middleware.cors) — runs for every request
2. require_session — cookie → RequestContext, or 401
3. require_admin — builds on require_session, or 403

Whatever stage fails raises an AppError; the handler never runs.
"""

from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.auth.cookies import read_session_cookie
from notevault.db.engine import get_db
from notevault.services.admin_service import AdminService
from notevault.services.session_service import SessionService


@dataclass(frozen=True)
class RequestContext:
    """The authenticated caller, passed explicitly into handlers."""

    user_id: int
    session_token: str


async def require_session(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> RequestContext:
    token = read_session_cookie(request)
    user_id = await SessionService(db).validate_session(token)
    return RequestContext(user_id=user_id, session_token=token)


async def require_admin(
    ctx: RequestContext = Depends(require_session),
    db: AsyncSession = Depends(get_db),
) -> RequestContext:
    await AdminService(db).require_admin(ctx.user_id)
    return ctx
