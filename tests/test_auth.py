"""Tests for authentication endpoints"""

import pytest
from sqlalchemy import select

from app.api.auth import create_refresh_token, decode_token
from app.errors import UnauthorizedError
from app.models.security_log import SecurityLog, SecurityEventType


@pytest.mark.asyncio
async def test_register_login_refresh_logout(test_db, client, test_tenant):
    response = await client.post(
        "/auth/register",
        json={"email": "new@example.com", "password": "longenough1", "name": "New Customer"},
    )
    assert response.status_code == 201
    assert response.json()["data"]["role"] == "CUSTOMER"

    response = await client.post(
        "/auth/register",
        json={"email": "new@example.com", "password": "longenough1", "name": "Again"},
    )
    assert response.status_code == 409

    response = await client.post(
        "/auth/login", data={"username": "new@example.com", "password": "longenough1"}
    )
    assert response.status_code == 200
    tokens = response.json()["data"]

    headers = {"Authorization": f"Bearer {tokens['access_token']}"}
    response = await client.get("/auth/me", headers=headers)
    assert response.json()["data"]["email"] == "new@example.com"

    response = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 200
    rotated = response.json()["data"]

    response = await client.post("/auth/logout", headers=headers)
    assert response.status_code == 200

    # Logout invalidates the stored refresh token
    response = await client.post("/auth/refresh", json={"refresh_token": rotated["refresh_token"]})
    assert response.status_code == 401

    events = {log.event_type for log in (await test_db.execute(select(SecurityLog))).scalars()}
    assert {
        SecurityEventType.USER_REGISTER.value,
        SecurityEventType.LOGIN_SUCCESS.value,
        SecurityEventType.LOGOUT.value,
    } <= events


@pytest.mark.asyncio
async def test_wrong_password_is_logged(test_db, client, test_user):
    response = await client.post(
        "/auth/login", data={"username": test_user.email, "password": "wrong-password"}
    )

    assert response.status_code == 401
    logs = (await test_db.execute(select(SecurityLog))).scalars().all()
    assert [log.event_type for log in logs] == [SecurityEventType.LOGIN_FAILED.value]
    assert logs[0].email == test_user.email


@pytest.mark.asyncio
async def test_register_rejects_short_password(client, test_tenant):
    response = await client.post(
        "/auth/register", json={"email": "short@example.com", "password": "short", "name": "Short"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_refresh_token_is_not_an_access_token(test_user):
    with pytest.raises(UnauthorizedError):
        decode_token(create_refresh_token(test_user), "access")
