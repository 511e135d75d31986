"""Test fixtures — a fresh in-memory SQLite store per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own engine over an in-memory SQLite database
   (StaticPool, so every checkout sees the same single connection)
   with foreign keys switched on and the schema created.
2. get_db is overridden so HTTP requests and the test body share one
   AsyncSession, which lets tests seed data through services and then
   inspect rows after a request.
3. The engine is disposed at the end; the database disappears with it.

Env vars are set before notevault is imported, because settings are
read once at import time. bcrypt is turned down to its minimum cost.
"""

import os

os.environ.setdefault("NOTEVAULT_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("NOTEVAULT_BCRYPT_ROUNDS", "4")

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from notevault.db.engine import enable_sqlite_foreign_keys, get_db  # noqa: E402
from notevault.db.models import Base  # noqa: E402
from notevault.main import app  # noqa: E402
from notevault.services.user_service import UserService  # noqa: E402


@pytest_asyncio.fixture()
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(db_engine):
    session = AsyncSession(bind=db_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()


@pytest_asyncio.fixture()
async def client(db_session):
    """HTTP client bound to the app, with get_db pointed at the test store.

    Learn: No auth override here. Tests log in through /api/login and the
    client's cookie jar carries the session cookie, so the real gate runs.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def make_user(db_session):
    """Factory: create a user straight through the credential store."""
    async def _make(email: str, password: str = "password123", is_admin: bool = False):
        return await UserService(db_session).register(email, password, is_admin=is_admin)

    return _make


@pytest_asyncio.fixture()
async def login(client):
    """Log the shared client in as someone else (drops any previous cookie)."""
    async def _login(email: str, password: str = "password123"):
        client.cookies.clear()
        r = await client.post("/api/login", json={"email": email, "password": password})
        assert r.status_code == 204, r.text
        return r

    return _login
