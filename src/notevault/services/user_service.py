"""User service — the credential store.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the database. Registration,
admin provisioning, and the startup bootstrap all funnel through
register(), so there is exactly one hashing path.

verify() deliberately fails the same way for "no such email" and
"wrong password": callers can't use login to probe which emails exist.
"""

import asyncio

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.auth.password import dummy_hash, hash_password, verify_password
from notevault.config import settings
from notevault.db.models import User
from notevault.errors import (
    AuthError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger()

MIN_PASSWORD_LENGTH = 6
MAX_EMAIL_LENGTH = 255


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Account records and password checks."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Lookups ────────────────────────────────────────

    async def get_user(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalars().first()

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    # ─── Registration ───────────────────────────────────

    async def register(self, email: str, password: str, is_admin: bool = False) -> User:
        """Create an account.

        Raises ValidationError for bad input, ConflictError if the
        normalized email is taken (including when a concurrent insert
        wins the race), InternalError if hashing fails.
        """
        email = normalize_email(email)
        if not email or "@" not in email or len(email) > MAX_EMAIL_LENGTH:
            raise ValidationError("valid email required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")

        if await self.get_by_email(email):
            raise ConflictError("email already registered")

        try:
            password_hash = await asyncio.to_thread(hash_password, password)
        except (ValueError, TypeError) as e:
            logger.error("user.hash_failed", error=str(e))
            raise InternalError("hash error") from e

        user = User(email=email, password_hash=password_hash, is_admin=is_admin)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError("email already registered") from e
        await self.db.refresh(user)

        logger.info("user.registered", user_id=user.id, is_admin=is_admin)
        return user

    # ─── Verification ───────────────────────────────────

    async def verify(self, email: str, password: str) -> User:
        """Return the user for a correct email/password pair, else AuthError.

        An unknown email is still checked against a dummy hash so both
        failures cost one bcrypt round. bcrypt runs in a worker thread.
        """
        user = await self.get_by_email(email)
        if user:
            stored_hash = user.password_hash
        else:
            stored_hash = await asyncio.to_thread(dummy_hash, settings.bcrypt_rounds)
        matches = await asyncio.to_thread(verify_password, password, stored_hash)
        if not user or not matches:
            raise AuthError("invalid credentials")
        return user

    # ─── Privilege flag ─────────────────────────────────

    async def set_admin_flag(self, user_id: int, flag: bool) -> None:
        """Idempotent. Setting the flag it already has is not an error."""
        result = await self.db.execute(
            update(User).where(User.id == user_id).values(is_admin=flag)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError("user not found")
        await self.db.commit()
        logger.info("user.admin_flag_set", user_id=user_id, is_admin=flag)
