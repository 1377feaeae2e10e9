# mypy: ignore-errors
# tests/v1/test_auth.py
"""Tests for authentication endpoints."""

from __future__ import annotations

from fastapi import status

from loopfeed.core.security import create_access_token, decode_access_token


def _register_payload(**overrides) -> dict:
    payload = {
        "username": "NewUser",
        "email": "New.User@Example.com",
        "full_name": "New User",
        "password": "secret123",
    }
    payload.update(overrides)
    return payload


def test_register_user_success(client) -> None:
    """Registration lower-cases the handle and email and returns a usable token."""
    response = client.post("/api/v1/auth/register", json=_register_payload())
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()

    assert data["user"]["username"] == "newuser"
    assert data["user"]["email"] == "new.user@example.com"
    assert data["user"]["account_type"] == "Personal"
    assert data["token_type"] == "bearer"
    assert decode_access_token(data["access_token"]) == data["user"]["id"]


def test_register_duplicate_is_conflict(client) -> None:
    """Usernames and emails are unique regardless of case."""
    client.post("/api/v1/auth/register", json=_register_payload())

    response = client.post(
        "/api/v1/auth/register",
        json=_register_payload(username="NEWUSER", email="other@example.com"),
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["kind"] == "conflict"

    response = client.post(
        "/api/v1/auth/register",
        json=_register_payload(username="someoneelse", email="NEW.USER@example.com"),
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_register_rejects_short_password_and_bad_account_type(client) -> None:
    response = client.post("/api/v1/auth/register", json=_register_payload(password="12345"))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "at least 6" in response.json()["detail"]

    response = client.post(
        "/api/v1/auth/register", json=_register_payload(account_type="Enterprise")
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_login_with_username_or_email(client, alice) -> None:
    by_name = client.post(
        "/api/v1/auth/login", json={"username": "ALICE", "password": "secret123"}
    )
    assert by_name.status_code == status.HTTP_200_OK
    assert by_name.json()["user"]["id"] == alice.id

    by_email = client.post(
        "/api/v1/auth/login", json={"email": "alice@example.com", "password": "secret123"}
    )
    assert by_email.status_code == status.HTTP_200_OK


def test_login_failures(client, alice) -> None:
    """Unknown users are 404, wrong passwords 401, missing identifier 422."""
    response = client.post("/api/v1/auth/login", json={"username": "nobody", "password": "x"})
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = client.post(
        "/api/v1/auth/login", json={"username": "alice", "password": "wrong-password"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = client.post("/api/v1/auth/login", json={"password": "secret123"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_me_requires_valid_token(client, alice, auth_headers) -> None:
    response = client.get("/api/v1/auth/me", headers=auth_headers(alice))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["username"] == "alice"

    response = client.get("/api/v1/auth/me")
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}

    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Could not validate credentials"


def test_token_for_deleted_user_is_rejected(client) -> None:
    headers = {"Authorization": f"Bearer {create_access_token(424242)}"}
    response = client.get("/api/v1/auth/me", headers=headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_change_password(client, alice, auth_headers) -> None:
    response = client.post(
        "/api/v1/auth/change-password",
        json={"current_password": "wrong", "new_password": "another1"},
        headers=auth_headers(alice),
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = client.post(
        "/api/v1/auth/change-password",
        json={"current_password": "secret123", "new_password": "another1"},
        headers=auth_headers(alice),
    )
    assert response.status_code == status.HTTP_200_OK

    response = client.post(
        "/api/v1/auth/login", json={"username": "alice", "password": "another1"}
    )
    assert response.status_code == status.HTTP_200_OK


def _login(client, username="alice"):
    response = client.post(
        "/api/v1/auth/login", json={"username": username, "password": "secret123"}
    )
    assert response.status_code == status.HTTP_200_OK
    return response.json()


def test_refresh_token_rotates(client, alice) -> None:
    """Each refresh token can be exchanged exactly once."""
    first = _login(client)

    response = client.post(
        "/api/v1/auth/refresh-token", json={"refresh_token": first["refresh_token"]}
    )
    assert response.status_code == status.HTTP_200_OK
    second = response.json()
    assert second["user"]["id"] == alice.id
    assert second["refresh_token"] != first["refresh_token"]
    assert decode_access_token(second["access_token"]) == alice.id

    replay = client.post(
        "/api/v1/auth/refresh-token", json={"refresh_token": first["refresh_token"]}
    )
    assert replay.status_code == status.HTTP_401_UNAUTHORIZED
    assert replay.json()["detail"] == "Refresh token is expired or used"


def test_new_login_replaces_refresh_token(client, alice) -> None:
    older = _login(client)
    _login(client)

    response = client.post(
        "/api/v1/auth/refresh-token", json={"refresh_token": older["refresh_token"]}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_logout_revokes_refresh_token(client, alice) -> None:
    tokens = _login(client)
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    response = client.post("/api/v1/auth/logout", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["message"] == "User logged out"

    response = client.post(
        "/api/v1/auth/refresh-token", json={"refresh_token": tokens["refresh_token"]}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_types_are_not_interchangeable(client, alice) -> None:
    tokens = _login(client)

    as_access = client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"}
    )
    assert as_access.status_code == status.HTTP_401_UNAUTHORIZED

    as_refresh = client.post(
        "/api/v1/auth/refresh-token", json={"refresh_token": tokens["access_token"]}
    )
    assert as_refresh.status_code == status.HTTP_401_UNAUTHORIZED
    assert as_refresh.json()["detail"] == "Invalid refresh token"


def test_password_change_revokes_refresh_token(client, alice) -> None:
    tokens = _login(client)
    client.post(
        "/api/v1/auth/change-password",
        json={"current_password": "secret123", "new_password": "another1"},
        headers={"Authorization": f"Bearer {tokens['access_token']}"},
    )

    response = client.post(
        "/api/v1/auth/refresh-token", json={"refresh_token": tokens["refresh_token"]}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
