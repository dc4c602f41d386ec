"""Tests for password login, session cookies and profile endpoints."""

import pytest
from httpx import AsyncClient

from app.core.deps import COOKIE_NAME
from app.core.security import create_two_factor_token, verify_password
from app.services import auth_service


@pytest.mark.asyncio
async def test_employee_login_sets_session_cookie(client: AsyncClient, test_user, test_password):
    response = await client.post(
        "/auth/login",
        json={"employee_id": test_user.employee_id, "password": test_password},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["user"]["id"] == str(test_user.id)
    assert "requires_two_factor" not in data or data["requires_two_factor"] is False
    assert COOKIE_NAME in response.cookies

    client.cookies.set(COOKIE_NAME, response.cookies[COOKIE_NAME])
    me = await client.get("/auth/me")
    assert me.json()["employee_id"] == test_user.employee_id


@pytest.mark.asyncio
async def test_login_records_last_signed_in(client: AsyncClient, db, test_user, test_password):
    assert test_user.last_signed_in is None

    await client.post(
        "/auth/login",
        json={"employee_id": test_user.employee_id, "password": test_password},
    )

    db.refresh(test_user)
    assert test_user.last_signed_in is not None


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    response = await client.post(
        "/auth/login",
        json={"employee_id": test_user.employee_id, "password": "nope"},
    )

    assert response.status_code == 401
    assert response.json() == {
        "detail": "Invalid employee ID or password",
        "code": "UNAUTHORIZED",
    }


@pytest.mark.asyncio
async def test_login_unknown_or_inactive_employee(client: AsyncClient, user_factory, test_password):
    inactive = user_factory(name="Gone", is_active=False)

    for employee_id in ("EMP-missing", inactive.employee_id):
        response = await client.post(
            "/auth/login",
            json={"employee_id": employee_id, "password": test_password},
        )
        assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_requires_csrf_header(client: AsyncClient, test_user, test_password):
    response = await client.post(
        "/auth/login",
        json={"employee_id": test_user.employee_id, "password": test_password},
        headers={"X-Requested-With": ""},
    )

    assert response.status_code == 403
    assert response.json() == {"detail": "Missing CSRF header", "code": "FORBIDDEN"}


@pytest.mark.asyncio
async def test_login_validation_error_is_bad_request(client: AsyncClient):
    response = await client.post("/auth/login", json={"employee_id": ""})

    assert response.status_code == 400
    assert response.json()["code"] == "BAD_REQUEST"


@pytest.mark.asyncio
async def test_me_without_session_is_null(client: AsyncClient):
    response = await client.get("/auth/me")

    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_me_never_exposes_secrets(authed_client: AsyncClient):
    data = (await authed_client.get("/auth/me")).json()

    assert "password_hash" not in data
    assert "two_factor_secret" not in data
    assert data["role"] == "user"


@pytest.mark.asyncio
async def test_revoked_session_rejected(authed_client: AsyncClient, db, test_user):
    auth_service.revoke_sessions(db, test_user)

    response = await authed_client.get("/notifications/all")
    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid session", "code": "UNAUTHORIZED"}

    assert (await authed_client.get("/auth/me")).json() is None


@pytest.mark.asyncio
async def test_missing_cookie_is_not_authenticated(client: AsyncClient):
    response = await client.get("/notifications/all")

    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


@pytest.mark.asyncio
async def test_two_factor_token_is_not_a_session(client: AsyncClient, test_user):
    token = create_two_factor_token(test_user.id, test_user.token_version)
    client.cookies.set(COOKIE_NAME, token)

    response = await client.get("/notifications/all")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_malformed_id_is_bad_request(authed_client: AsyncClient):
    response = await authed_client.post(
        "/notifications/mark-as-read",
        json={"notification_id": "not-a-uuid"},
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid id", "code": "BAD_REQUEST"}


@pytest.mark.asyncio
async def test_logout_clears_cookie(authed_client: AsyncClient):
    response = await authed_client.post("/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert COOKIE_NAME in response.headers.get("set-cookie", "")


# =============================================================================
# Profile
# =============================================================================


@pytest.mark.asyncio
async def test_change_password(authed_client: AsyncClient, db, test_user, test_password):
    response = await authed_client.post(
        "/auth/change-password",
        json={"current_password": test_password, "new_password": "n3w-secret"},
    )

    assert response.status_code == 200
    db.refresh(test_user)
    assert verify_password("n3w-secret", test_user.password_hash)


@pytest.mark.asyncio
async def test_change_password_revokes_old_session(
    authed_client: AsyncClient, client: AsyncClient, db, test_user, test_password
):
    old_token = authed_client.cookies[COOKIE_NAME]

    response = await authed_client.post(
        "/auth/change-password",
        json={"current_password": test_password, "new_password": "n3w-secret"},
    )
    assert response.status_code == 200
    new_token = response.cookies[COOKIE_NAME]
    assert new_token != old_token

    db.refresh(test_user)
    assert test_user.token_version == 1

    client.cookies.set(COOKIE_NAME, old_token)
    assert (await client.get("/auth/me")).json() is None

    client.cookies.set(COOKIE_NAME, new_token)
    assert (await client.get("/auth/me")).json()["id"] == str(test_user.id)


@pytest.mark.asyncio
async def test_change_password_rejects_overlong_password(
    authed_client: AsyncClient, db, test_user, test_password
):
    response = await authed_client.post(
        "/auth/change-password",
        json={"current_password": test_password, "new_password": "x" * 73},
    )

    assert response.status_code == 400
    assert "72 bytes" in response.json()["detail"]
    db.refresh(test_user)
    assert verify_password(test_password, test_user.password_hash)


@pytest.mark.asyncio
async def test_change_password_same_value_rejected(authed_client: AsyncClient, test_password):
    response = await authed_client.post(
        "/auth/change-password",
        json={"current_password": test_password, "new_password": test_password},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "New password must be different from current password"


@pytest.mark.asyncio
async def test_change_password_wrong_current(authed_client: AsyncClient, test_password):
    response = await authed_client.post(
        "/auth/change-password",
        json={"current_password": "wrong-one", "new_password": "n3w-secret"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid current password"


@pytest.mark.asyncio
async def test_update_avatar(authed_client: AsyncClient, db, test_user):
    response = await authed_client.post(
        "/auth/update-avatar",
        json={"avatar": "/uploads/avatars/me.png"},
    )

    assert response.status_code == 200
    db.refresh(test_user)
    assert test_user.avatar == "/uploads/avatars/me.png"
