"""Credential store tests — registration, verification, admin flag."""

import asyncio

import pytest

from notevault.auth.password import dummy_hash
from notevault.config import settings
from notevault.errors import AuthError, ConflictError, NotFoundError, ValidationError
from notevault.schemas.user import UserRead
from notevault.services import user_service
from notevault.services.user_service import UserService, normalize_email


@pytest.mark.asyncio
async def test_register_then_verify(db_session):
    svc = UserService(db_session)
    user = await svc.register("A@Ex.com", "secret1")

    assert user.email == "a@ex.com"
    assert user.is_admin is False
    assert user.password_hash.startswith("$2")
    assert user.password_hash != "secret1"

    verified = await svc.verify("a@ex.com", "secret1")
    assert verified.id == user.id

    verified = await svc.verify("  A@EX.COM ", "secret1")
    assert verified.id == user.id


@pytest.mark.asyncio
async def test_verify_fails_uniformly(db_session):
    svc = UserService(db_session)
    await svc.register("a@ex.com", "secret1")

    with pytest.raises(AuthError) as wrong:
        await svc.verify("a@ex.com", "wrong")
    with pytest.raises(AuthError) as unknown:
        await svc.verify("ghost@ex.com", "secret1")

    assert type(wrong.value) is type(unknown.value)
    assert wrong.value.message == unknown.value.message


@pytest.mark.asyncio
async def test_duplicate_email_conflicts_after_normalization(db_session):
    svc = UserService(db_session)
    await svc.register("dup@example.com", "password123")

    with pytest.raises(ConflictError):
        await svc.register("  DUP@example.COM ", "password123")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email,password",
    [
        ("", "password123"),
        ("   ", "password123"),
        ("no-at-sign", "password123"),
        ("short@example.com", "12345"),
        ("x" * 250 + "@example.com", "password123"),
    ],
)
async def test_register_rejects_bad_input(db_session, email, password):
    with pytest.raises(ValidationError):
        await UserService(db_session).register(email, password)


@pytest.mark.asyncio
async def test_register_admin_flag(db_session):
    user = await UserService(db_session).register("boss@example.com", "password123", is_admin=True)
    assert user.is_admin is True


@pytest.mark.asyncio
async def test_set_admin_flag_is_idempotent(db_session):
    svc = UserService(db_session)
    user = await svc.register("flag@example.com", "password123")

    await svc.set_admin_flag(user.id, True)
    await svc.set_admin_flag(user.id, True)
    assert (await svc.get_user(user.id)).is_admin is True

    await svc.set_admin_flag(user.id, False)
    assert (await svc.get_user(user.id)).is_admin is False


@pytest.mark.asyncio
async def test_set_admin_flag_unknown_user(db_session):
    with pytest.raises(NotFoundError):
        await UserService(db_session).set_admin_flag(9999, True)


@pytest.mark.asyncio
async def test_list_users_hides_password_hash(db_session):
    svc = UserService(db_session)
    await svc.register("one@example.com", "password123")
    await svc.register("two@example.com", "password123", is_admin=True)

    users = await svc.list_users()
    assert [u.email for u in users] == ["one@example.com", "two@example.com"]

    dumped = [UserRead.model_validate(u).model_dump(by_alias=True) for u in users]
    assert set(dumped[0]) == {"id", "email", "isAdmin", "createdAt"}
    assert dumped[1]["isAdmin"] is True


def test_normalize_email():
    assert normalize_email("  Mixed.Case@Example.COM\n") == "mixed.case@example.com"


@pytest.mark.asyncio
async def test_unknown_email_still_runs_bcrypt(db_session, monkeypatch):
    """Both failure paths cost a password check, so timing doesn't reveal registered emails."""
    svc = UserService(db_session)
    await svc.register("real@example.com", "secret1")

    checked = []
    real_verify = user_service.verify_password

    def spy(password, password_hash):
        checked.append(password_hash)
        return real_verify(password, password_hash)

    monkeypatch.setattr(user_service, "verify_password", spy)

    with pytest.raises(AuthError):
        await svc.verify("ghost@example.com", "secret1")
    with pytest.raises(AuthError):
        await svc.verify("real@example.com", "wrong-password")

    assert len(checked) == 2
    assert checked[0] == dummy_hash(settings.bcrypt_rounds)
    assert checked[0].startswith("$2")


@pytest.mark.asyncio
async def test_bcrypt_runs_off_the_event_loop(db_session, monkeypatch):
    offloaded = []
    real_to_thread = asyncio.to_thread

    async def spy(fn, *args, **kwargs):
        offloaded.append(fn.__name__)
        return await real_to_thread(fn, *args, **kwargs)

    monkeypatch.setattr(user_service.asyncio, "to_thread", spy)
    svc = UserService(db_session)

    await svc.register("thread@example.com", "secret1")
    await svc.verify("thread@example.com", "secret1")

    assert offloaded == ["hash_password", "verify_password"]
