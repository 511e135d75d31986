"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with NOTEVAULT_ prefix
(and an optional .env file). Nothing here touches the database; the
bootstrap admin pair is validated when it is applied at startup.

Learn: pydantic-settings auto-loads from environment, validates types,
provides defaults. `settings` is a module singleton, imported everywhere.
"""

from datetime import timedelta

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_SESSION_TTL_HOURS = 168


class Settings(BaseSettings):
    """All app configuration. Set via NOTEVAULT_* env vars."""

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    environment: str = "development"
    debug: bool = False

    # Store
    database_url: str = "sqlite+aiosqlite:///./notes.db"
    lock_timeout_seconds: float = 5.0  # wait-for-lock bound before a write fails

    # CORS: a single trusted frontend origin
    frontend_origin: str = "http://localhost:5173"

    # Session cookie
    cookie_name: str = "notes_session"
    cookie_secure: bool = False
    session_ttl_hours: int = DEFAULT_SESSION_TTL_HOURS

    # Passwords
    bcrypt_rounds: int = 12

    # Accounts
    registration_enabled: bool = False
    admin_email: str = ""
    admin_password: str = ""

    model_config = {
        "env_prefix": "NOTEVAULT_",
        "env_file": [".env"],
        "extra": "ignore",
    }

    @field_validator("session_ttl_hours")
    @classmethod
    def fallback_ttl(cls, v: int) -> int:
        """Non-positive TTLs fall back to the one-week default."""
        return v if v > 0 else DEFAULT_SESSION_TTL_HOURS

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(hours=self.session_ttl_hours)


# Singleton, import this everywhere
settings = Settings()
