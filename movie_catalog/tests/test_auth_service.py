# tests/test_auth_service.py
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from movie_catalog.db.crud import sessions as session_store
from movie_catalog.db.crud import users as user_store
from movie_catalog.errors import AuthError, ConflictError, InternalError, ValidationError
from movie_catalog.services import auth_service


async def test_register_returns_public_user_only(db):
    out = await auth_service.register(db, "alice", "a@x.com", "pw123")
    assert out["message"] == "Registration successful! You can now log in."
    assert set(out["user"]) == {"user_id", "username"}
    assert out["user"]["username"] == "alice"


async def test_register_stores_a_hash_not_the_password(db):
    await auth_service.register(db, "alice", "a@x.com", "pw123")
    user = await user_store.find_user_by_username(db, "alice")
    assert user.password_hash != "pw123"
    assert user.password_hash.startswith("$2")


@pytest.mark.parametrize(
    "username,email",
    [("alice", "other@x.com"), ("other", "a@x.com")],
)
async def test_register_duplicate_conflicts(db, username, email):
    await auth_service.register(db, "alice", "a@x.com", "pw123")
    with pytest.raises(ConflictError) as exc:
        await auth_service.register(db, username, email, "pw456")
    assert exc.value.message == "Username or email already exists."


@pytest.mark.parametrize(
    "username,email,password",
    [(None, "a@x.com", "pw"), ("alice", "", "pw"), ("alice", "a@x.com", None)],
)
async def test_register_requires_all_fields(db, username, email, password):
    with pytest.raises(ValidationError) as exc:
        await auth_service.register(db, username, email, password)
    assert exc.value.message == "Username, email, and password required."


async def test_register_rejects_malformed_email(db):
    with pytest.raises(ValidationError):
        await auth_service.register(db, "alice", "not-an-email", "pw123")


@pytest.mark.parametrize(
    "username,email",
    [("a" * 65, "a@x.com"), ("alice", "a" * 250 + "@x.com")],
)
async def test_register_rejects_values_wider_than_columns(db, username, email):
    with pytest.raises(ValidationError) as exc:
        await auth_service.register(db, username, email, "pw123")
    assert exc.value.message == "Username or email is too long."


async def test_register_accepts_username_at_column_width(db):
    out = await auth_service.register(db, "a" * 64, "a@x.com", "pw123")
    assert out["user"]["username"] == "a" * 64


async def test_register_maps_store_failure_to_internal_error(db, monkeypatch):
    async def boom(*a, **k):
        raise OperationalError("INSERT ...", {}, Exception("db down"))

    monkeypatch.setattr(user_store, "create_user", boom)
    with pytest.raises(InternalError) as exc:
        await auth_service.register(db, "alice", "a@x.com", "pw123")
    assert exc.value.message == "Registration failed due to server error."
    assert "INSERT" not in exc.value.message


async def test_login_success_opens_session(db):
    await auth_service.register(db, "alice", "a@x.com", "pw123")
    body, token = await auth_service.login(db, "alice", "pw123")
    assert body["message"] == "Login successful!"
    assert body["user"]["username"] == "alice"
    assert "password_hash" not in body["user"]

    st = await auth_service.status(db, token)
    assert st == {"isLoggedIn": True, "user": body["user"]}


async def test_login_failures_share_one_message(db):
    await auth_service.register(db, "alice", "a@x.com", "pw123")
    with pytest.raises(AuthError) as wrong_pw:
        await auth_service.login(db, "alice", "nope")
    with pytest.raises(AuthError) as unknown:
        await auth_service.login(db, "mallory", "pw123")
    assert wrong_pw.value.message == unknown.value.message == "Invalid username or password."


async def test_login_requires_fields(db):
    with pytest.raises(ValidationError):
        await auth_service.login(db, "alice", "")


async def test_login_replaces_previous_session(db):
    await auth_service.register(db, "alice", "a@x.com", "pw123")
    _, first = await auth_service.login(db, "alice", "pw123")
    _, second = await auth_service.login(db, "alice", "pw123", previous_token=first)
    assert first != second
    assert await session_store.resolve_session(db, first) is None
    assert (await auth_service.status(db, second))["isLoggedIn"] is True


async def test_logout_then_status_and_double_logout(db):
    await auth_service.register(db, "alice", "a@x.com", "pw123")
    _, token = await auth_service.login(db, "alice", "pw123")

    assert await auth_service.logout(db, token) == {"message": "Logout successful."}
    assert await auth_service.status(db, token) == {"isLoggedIn": False}
    # second logout and logout without any session are fine
    await auth_service.logout(db, token)
    await auth_service.logout(db, None)


async def test_logout_store_failure_is_internal_error(db, monkeypatch):
    async def boom(*a, **k):
        raise OperationalError("DELETE ...", {}, Exception("db down"))

    monkeypatch.setattr(session_store, "destroy_session", boom)
    with pytest.raises(InternalError) as exc:
        await auth_service.logout(db, "token")
    assert exc.value.message == "Logout failed."


async def test_status_anonymous_and_expired(db, users):
    alice, _ = users
    assert await auth_service.status(db, None) == {"isLoggedIn": False}
    assert await auth_service.status(db, "garbage") == {"isLoggedIn": False}
    expired = await session_store.create_session(db, alice.user_id, ttl=timedelta(seconds=-1))
    assert await auth_service.status(db, expired) == {"isLoggedIn": False}


async def test_status_never_raises_on_store_failure(db, monkeypatch):
    async def boom(*a, **k):
        raise OperationalError("SELECT ...", {}, Exception("db down"))

    monkeypatch.setattr(session_store, "resolve_session", boom)
    assert await auth_service.status(db, "token") == {"isLoggedIn": False}
