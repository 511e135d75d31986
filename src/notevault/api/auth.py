"""Auth API — login, logout, registration, current user.

Learn: Routes for the session lifecycle:
- POST /login → email/password → session cookie (204, no body)
- POST /logout → revoke the session named by the cookie, clear it (204)
- POST /register → self-service signup, only when registration_enabled
- GET /me → current user (needs a session)

Login and logout are open routes. Logout is idempotent: with no cookie,
or a cookie for an already-dead session, it still clears the cookie.
"""

import structlog
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.auth.cookies import (
    clear_session_cookie,
    read_session_cookie,
    set_session_cookie,
)
from notevault.auth.dependencies import RequestContext, require_session
from notevault.config import settings
from notevault.db.engine import get_db
from notevault.errors import NotFoundError, ValidationError
from notevault.schemas.user import Credentials, MeRead, UserRead
from notevault.services.session_service import SessionService
from notevault.services.user_service import UserService, normalize_email

logger = structlog.get_logger()

router = APIRouter()


# ─── Login / logout ──────────────────────────────────────


@router.post("/login", status_code=204)
async def login(body: Credentials, db: AsyncSession = Depends(get_db)):
    """Verify credentials and start a session."""
    if not normalize_email(body.email) or not body.password:
        raise ValidationError("email and password required")

    user = await UserService(db).verify(body.email, body.password)
    token = await SessionService(db).create_session(user.id, settings.session_ttl)

    response = Response(status_code=204)
    set_session_cookie(response, token)
    logger.info("auth.login_succeeded", user_id=user.id)
    return response


@router.post("/logout", status_code=204)
async def logout(request: Request, db: AsyncSession = Depends(get_db)):
    await SessionService(db).destroy_session(read_session_cookie(request))

    response = Response(status_code=204)
    clear_session_cookie(response)
    return response


# ─── Registration ────────────────────────────────────────


@router.post("/register", response_model=UserRead, status_code=201)
async def register(body: Credentials, db: AsyncSession = Depends(get_db)):
    """Create an account. Hidden (404) unless registration is enabled."""
    if not settings.registration_enabled:
        raise NotFoundError()
    return await UserService(db).register(body.email, body.password)


# ─── Current user ────────────────────────────────────────


@router.get("/me", response_model=MeRead)
async def get_me(
    ctx: RequestContext = Depends(require_session),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).get_user(ctx.user_id)
    if not user:
        raise NotFoundError()
    return MeRead(user_id=user.id, email=user.email, is_admin=user.is_admin)
