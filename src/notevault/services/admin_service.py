"""Admin service — privilege checks, guarded elevation, and the startup bootstrap.

Learn: Admin is just a boolean on the user row. There are three ways to
get it: the bootstrap pair in config (applied once at startup), another
admin creating you with isAdmin set, or another admin flipping the flag.
An admin can't take their own flag away; that has to be done by a
different admin, so the last admin can't lock everyone out by accident.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.db.models import User
from notevault.errors import ConfigurationError, ForbiddenError, ValidationError
from notevault.services.user_service import UserService, normalize_email

logger = structlog.get_logger()

MIN_BOOTSTRAP_PASSWORD_LENGTH = 8


class AdminService:
    """Privileged operations. Callers must pass require_admin first."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserService(db)

    async def require_admin(self, user_id: int | None) -> User:
        """Return the admin user, or raise ForbiddenError."""
        user = await self.users.get_user(user_id) if user_id is not None else None
        if user is None or not user.is_admin:
            raise ForbiddenError("admin only")
        return user

    async def create_user(self, email: str, password: str, is_admin: bool = False) -> User:
        return await self.users.register(email, password, is_admin=is_admin)

    async def list_users(self) -> list[User]:
        return await self.users.list_users()

    async def set_admin_flag(self, actor_id: int, target_id: int, flag: bool) -> None:
        if actor_id == target_id and not flag:
            raise ValidationError("cannot demote yourself")
        await self.users.set_admin_flag(target_id, flag)
        logger.info("admin.flag_changed", actor_id=actor_id, target_id=target_id, is_admin=flag)


async def bootstrap_admin(db: AsyncSession, email: str, password: str) -> User | None:
    """Ensure the configured admin account exists and is an admin.

    Both values empty → nothing to do. Exactly one set, or a short
    password → ConfigurationError (startup must abort). An existing
    account is promoted with its password left untouched.
    """
    email = normalize_email(email or "")
    password = password or ""

    if not email and not password:
        return None
    if not email or not password:
        raise ConfigurationError(
            "NOTEVAULT_ADMIN_EMAIL and NOTEVAULT_ADMIN_PASSWORD must both be set"
        )
    if len(password) < MIN_BOOTSTRAP_PASSWORD_LENGTH:
        raise ConfigurationError(
            f"NOTEVAULT_ADMIN_PASSWORD must be at least {MIN_BOOTSTRAP_PASSWORD_LENGTH} chars"
        )

    users = UserService(db)
    existing = await users.get_by_email(email)
    if existing:
        if not existing.is_admin:
            await users.set_admin_flag(existing.id, True)
            logger.info("admin.bootstrap_promoted", user_id=existing.id)
        return existing

    try:
        user = await users.register(email, password, is_admin=True)
    except ValidationError as e:
        raise ConfigurationError(f"NOTEVAULT_ADMIN_EMAIL: {e.message}") from e
    logger.info("admin.bootstrap_created", user_id=user.id)
    return user
