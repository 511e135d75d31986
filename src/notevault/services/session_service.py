"""Session service — issue, validate, and revoke login sessions.

Learn: A session is a row keyed by a random 32-byte token. Nothing is
signed or encoded into the token, so revoking one is just deleting
the row.

Expiry is absolute (created at login, never extended) and enforced
lazily: validate_session() deletes an expired row the first time it
is presented. There is no background reaper inside the server;
sweep_expired() exists for the operator CLI and only reclaims space,
it never changes which tokens are accepted.

The clock is injectable so tests can step past a TTL without sleeping.
"""

from collections.abc import Callable
from datetime import datetime, timedelta

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.auth.tokens import new_session_token
from notevault.db.models import Session, as_utc, utcnow
from notevault.errors import AuthError, InternalError

logger = structlog.get_logger()


class SessionService:
    """Manages cookie-backed login sessions."""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    # ─── Session lifecycle ────────────────────────────────

    async def create_session(self, user_id: int, ttl: timedelta) -> str:
        """Persist a new session and return its token for the cookie.

        A token collision trips the unique constraint and surfaces as
        InternalError; an existing session is never overwritten.
        """
        now = self.clock()
        token = new_session_token()
        self.db.add(
            Session(user_id=user_id, token=token, expires_at=now + ttl, created_at=now)
        )
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error("session.create_conflict", user_id=user_id)
            raise InternalError("could not create session") from e

        logger.info("session.created", user_id=user_id, ttl_seconds=int(ttl.total_seconds()))
        return token

    async def validate_session(self, token: str | None) -> int:
        """Resolve a token to its user id, or raise AuthError."""
        if not token or not token.strip():
            raise AuthError()

        result = await self.db.execute(select(Session).where(Session.token == token))
        session = result.scalars().first()
        if not session:
            raise AuthError()

        if self.clock() > as_utc(session.expires_at):
            user_id = session.user_id
            await self.db.delete(session)
            await self.db.commit()
            logger.info("session.expired", user_id=user_id)
            raise AuthError()

        return session.user_id

    async def destroy_session(self, token: str | None) -> None:
        """Logout. Unknown or empty tokens are fine."""
        if not token:
            return
        result = await self.db.execute(delete(Session).where(Session.token == token))
        await self.db.commit()
        if result.rowcount:
            logger.info("session.destroyed")

    # ─── Housekeeping ─────────────────────────────────────

    async def sweep_expired(self) -> int:
        """Delete every session already past its expiry. Returns the count."""
        result = await self.db.execute(
            delete(Session)
            .where(Session.expires_at < self.clock())
            .execution_options(synchronize_session="fetch")
        )
        await self.db.commit()
        removed = result.rowcount or 0
        logger.info("session.swept", removed=removed)
        return removed
