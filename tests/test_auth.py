from datetime import timedelta

import pytest

from app.core.config import DEV_SECRET_KEY, Settings
from app.core.security import create_access_token, decode_token, hash_password, verify_password
from app.models.user import UserRole

PASSWORD = "password123"


@pytest.mark.asyncio
async def test_login_returns_token_and_sets_cookie(client, officer):
    res = await client.post("/api/auth/login", json={"email": officer.email, "password": PASSWORD})
    assert res.status_code == 200

    data = res.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["role"] == "DEPARTMENTAL_OFFICER"
    assert "password_hash" not in data["user"]
    assert "session_token" in res.cookies

    payload = decode_token(data["access_token"])
    assert payload["sub"] == str(officer.id)
    assert payload["role"] == "DEPARTMENTAL_OFFICER"


@pytest.mark.asyncio
async def test_login_rejects_bad_password(client, officer):
    res = await client.post("/api/auth/login", json={"email": officer.email, "password": "wrong-pass"})
    assert res.status_code == 401
    assert res.json() == {"error": "Invalid credentials"}


@pytest.mark.asyncio
async def test_login_validation_error_is_400(client):
    res = await client.post("/api/auth/login", json={"email": "not-an-email"})
    assert res.status_code == 400
    assert "error" in res.json()


@pytest.mark.asyncio
async def test_session_endpoint(client, lecturer, headers_for):
    res = await client.get("/api/auth/session", headers=headers_for(lecturer))
    assert res.status_code == 200

    data = res.json()
    assert data["role"] == "LECTURER"
    assert data["dashboard"] == "/lecturer/dashboard"
    assert "CREATE_REQUEST" in data["permissions"]
    assert "REGISTER_ASSETS" not in data["permissions"]


@pytest.mark.asyncio
async def test_session_endpoint_without_session_is_401(client):
    res = await client.get("/api/auth/session")
    assert res.status_code == 401
    assert res.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_signout_clears_cookie(client):
    res = await client.post("/api/auth/signout")
    assert res.status_code == 200
    assert "session_token" in res.headers.get("set-cookie", "")


@pytest.mark.asyncio
async def test_token_with_unknown_role_is_not_a_session(client):
    token = create_access_token(subject="abc", data={"role": "JANITOR"})
    res = await client.get("/dashboard", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 307
    assert res.headers["location"].endswith("/auth/signin")


@pytest.mark.asyncio
async def test_expired_token_is_not_a_session(client, admin):
    token = create_access_token(
        subject=str(admin.id),
        expires_delta=timedelta(minutes=-5),
        data={"role": UserRole.FACULTY_ADMIN.value},
    )
    res = await client.get("/admin/dashboard", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 307
    assert res.headers["location"].endswith("/auth/signin")


def test_password_hashing_handles_long_passwords():
    long_password = "x" * 100
    hashed = hash_password(long_password)
    assert verify_password(long_password, hashed)
    assert not verify_password("x" * 99, hashed)


# ------------------------------------------------------------------
# Secret key handling
# ------------------------------------------------------------------
def test_production_without_secret_fails_fast():
    with pytest.raises(ValueError):
        Settings(DATABASE_URL="sqlite+aiosqlite://", ENV="production", SECRET_KEY=None)


def test_development_falls_back_to_dev_secret():
    settings = Settings(DATABASE_URL="sqlite+aiosqlite://", ENV="dev", SECRET_KEY=None)
    assert settings.SECRET_KEY == DEV_SECRET_KEY


def test_explicit_secret_is_kept_in_production():
    settings = Settings(DATABASE_URL="sqlite+aiosqlite://", ENV="prod", SECRET_KEY="s3cret")
    assert settings.SECRET_KEY == "s3cret"
    assert settings.is_production
