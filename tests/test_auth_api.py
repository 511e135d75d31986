"""Auth API tests.

Learn: Tests cover:
1. Login → session cookie with the right attributes
2. Uniform failure for unknown email vs wrong password
3. /me through the real session gate
4. Logout → row deleted, cookie cleared, idempotent
5. Opt-in self-registration
"""

import pytest
from sqlalchemy import func, select

from notevault.config import settings
from notevault.db.models import Session


def _cookie_attrs(set_cookie: str) -> list[str]:
    return [part.strip().lower() for part in set_cookie.split(";")[1:]]


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_sets_session_cookie(client, make_user):
    await make_user("cookie@example.com")

    r = await client.post(
        "/api/login", json={"email": "cookie@example.com", "password": "password123"}
    )
    assert r.status_code == 204

    set_cookie = r.headers["set-cookie"]
    assert set_cookie.startswith(f"{settings.cookie_name}=")
    attrs = _cookie_attrs(set_cookie)
    assert "httponly" in attrs
    assert "path=/" in attrs
    assert "samesite=lax" in attrs
    assert f"max-age={settings.session_ttl_hours * 3600}" in attrs
    assert "secure" not in attrs


@pytest.mark.asyncio
async def test_login_normalizes_email(client, make_user):
    """Registered as "A@Ex.com", logs in as " a@ex.com "."""
    await make_user("A@Ex.com", "secret1")

    r = await client.post("/api/login", json={"email": " a@ex.com ", "password": "secret1"})
    assert r.status_code == 204


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client, make_user):
    await make_user("known@example.com")

    wrong_pw = await client.post(
        "/api/login", json={"email": "known@example.com", "password": "not-the-password"}
    )
    unknown = await client.post(
        "/api/login", json={"email": "nobody@example.com", "password": "not-the-password"}
    )

    assert wrong_pw.status_code == unknown.status_code == 401
    assert wrong_pw.json() == unknown.json() == {"error": "invalid credentials"}
    assert "set-cookie" not in wrong_pw.headers


@pytest.mark.asyncio
async def test_login_requires_email_and_password(client):
    r = await client.post("/api/login", json={"email": "a@example.com"})
    assert r.status_code == 400

    r = await client.post("/api/login", json={"email": "   ", "password": "x"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_login_bad_json(client):
    r = await client.post(
        "/api/login", content="{not json", headers={"Content-Type": "application/json"}
    )
    assert r.status_code == 400
    assert "error" in r.json()


# ═══════════════════════════════════════════════════════════
# Current user (/me)
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_me_with_session(client, make_user, login):
    user = await make_user("me@example.com")
    await login("me@example.com")

    r = await client.get("/api/me")
    assert r.status_code == 200
    assert r.json() == {"userId": user.id, "email": "me@example.com", "isAdmin": False}


@pytest.mark.asyncio
async def test_me_without_cookie(client):
    r = await client.get("/api/me")
    assert r.status_code == 401
    assert r.json() == {"error": "unauthorized"}


@pytest.mark.asyncio
async def test_me_with_unknown_token(client):
    client.cookies.set(settings.cookie_name, "definitely-not-a-session")
    r = await client.get("/api/me")
    assert r.status_code == 401


# ═══════════════════════════════════════════════════════════
# Logout
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_logout_revokes_session(client, db_session, make_user, login):
    await make_user("bye@example.com")
    await login("bye@example.com")
    token = client.cookies.get(settings.cookie_name)
    assert token

    r = await client.post("/api/logout")
    assert r.status_code == 204
    assert "max-age=0" in _cookie_attrs(r.headers["set-cookie"])

    count = await db_session.scalar(
        select(func.count()).select_from(Session).where(Session.token == token)
    )
    assert count == 0

    # Replaying the old token doesn't work either
    client.cookies.set(settings.cookie_name, token)
    r = await client.get("/api/me")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_logout_without_session_is_fine(client):
    r = await client.post("/api/logout")
    assert r.status_code == 204

    client.cookies.set(settings.cookie_name, "stale-token")
    r = await client.post("/api/logout")
    assert r.status_code == 204


# ═══════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_disabled_by_default(client):
    r = await client.post(
        "/api/register", json={"email": "new@example.com", "password": "password123"}
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_register_when_enabled(client, monkeypatch):
    monkeypatch.setattr(settings, "registration_enabled", True)

    r = await client.post(
        "/api/register", json={"email": "  New@Example.com", "password": "password123"}
    )
    assert r.status_code == 201
    body = r.json()
    assert body["email"] == "new@example.com"
    assert body["isAdmin"] is False
    assert "passwordHash" not in body

    r = await client.post(
        "/api/register", json={"email": "new@EXAMPLE.com", "password": "password123"}
    )
    assert r.status_code == 409

    r = await client.post("/api/register", json={"email": "short@example.com", "password": "abc"})
    assert r.status_code == 400

    r = await client.post(
        "/api/login", json={"email": "new@example.com", "password": "password123"}
    )
    assert r.status_code == 204
