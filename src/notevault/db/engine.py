"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.

SQLite (the default, through aiosqlite) needs two things switched on per
connection: foreign keys, so cascades actually fire, and a busy timeout,
so a writer waits for a lock instead of failing immediately. PostgreSQL
(through asyncpg) gets the same wait bound via its lock_timeout setting.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from notevault.config import settings
from notevault.db.models import Base


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on FK enforcement for every new SQLite connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str) -> AsyncEngine:
    if is_sqlite(url):
        new_engine = create_async_engine(
            url,
            echo=settings.debug,
            connect_args={"timeout": settings.lock_timeout_seconds},
        )
        enable_sqlite_foreign_keys(new_engine)
        return new_engine

    # Connection pool: min 5, max 20 connections.
    lock_timeout_ms = int(settings.lock_timeout_seconds * 1000)
    return create_async_engine(
        url,
        echo=settings.debug,
        pool_size=5,
        max_overflow=15,
        connect_args={"server_settings": {"lock_timeout": str(lock_timeout_ms)}},
    )


engine = build_engine(settings.database_url)

# Session factory: each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def create_schema(target: AsyncEngine = engine) -> None:
    """Create missing tables. Idempotent; existing tables are left alone."""
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
