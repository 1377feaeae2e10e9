# mypy: ignore-errors
# tests/v1/test_users.py
"""Tests for profile and follow graph endpoints."""

from __future__ import annotations

from fastapi import status


def test_follow_and_unfollow(client, alice, bob, auth_headers) -> None:
    response = client.post(f"/api/v1/users/follow/{bob.id}", headers=auth_headers(alice))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["followers_count"] == 1
    assert response.json()["is_following"] is True

    again = client.post(f"/api/v1/users/follow/{bob.id}", headers=auth_headers(alice))
    assert again.status_code == status.HTTP_409_CONFLICT
    assert again.json()["detail"] == "Already following this user"

    response = client.post(f"/api/v1/users/unfollow/{bob.id}", headers=auth_headers(alice))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["followers_count"] == 0

    again = client.post(f"/api/v1/users/unfollow/{bob.id}", headers=auth_headers(alice))
    assert again.status_code == status.HTTP_409_CONFLICT
    assert again.json()["detail"] == "Not following this user"


def test_follow_errors(client, alice, auth_headers) -> None:
    response = client.post(f"/api/v1/users/follow/{alice.id}", headers=auth_headers(alice))
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "Cannot follow yourself"

    response = client.post("/api/v1/users/follow/9999", headers=auth_headers(alice))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "User not found"


def test_followers_and_following_lists(client, alice, bob, carol, auth_headers) -> None:
    client.post(f"/api/v1/users/follow/{alice.id}", headers=auth_headers(bob))
    client.post(f"/api/v1/users/follow/{alice.id}", headers=auth_headers(carol))

    followers = client.get(f"/api/v1/users/followers/{alice.id}").json()
    assert [user["username"] for user in followers["data"]] == ["carol", "bob"]
    assert followers["pagination"]["has_more"] is False

    following = client.get(f"/api/v1/users/following/{bob.id}").json()
    assert [user["username"] for user in following["data"]] == ["alice"]

    missing = client.get("/api/v1/users/followers/9999")
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_follow_status(client, alice, bob, auth_headers) -> None:
    client.post(f"/api/v1/users/follow/{bob.id}", headers=auth_headers(alice))

    response = client.get(f"/api/v1/users/status/{bob.id}", headers=auth_headers(alice))
    assert response.json() == {"is_following": True, "is_followed_by": False}


def test_profile_includes_counts_and_viewer_state(
    client, make_post, alice, bob, auth_headers
) -> None:
    make_post(bob, title="one")
    make_post(bob, title="two")
    client.post(f"/api/v1/users/follow/{bob.id}", headers=auth_headers(alice))

    profile = client.get(f"/api/v1/users/{bob.id}", headers=auth_headers(alice)).json()
    assert profile["posts_count"] == 2
    assert profile["followers_count"] == 1
    assert profile["is_following"] is True
    assert "email" not in profile

    anonymous = client.get(f"/api/v1/users/{bob.id}").json()
    assert anonymous["is_following"] is False

    assert client.get("/api/v1/users/9999").status_code == status.HTTP_404_NOT_FOUND


def test_update_profile(client, alice, auth_headers) -> None:
    response = client.patch(
        "/api/v1/users/me",
        json={"bio": "Filmmaker", "full_name": "  Alice Liddell "},
        headers=auth_headers(alice),
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["bio"] == "Filmmaker"
    assert data["full_name"] == "Alice Liddell"

    response = client.patch(
        "/api/v1/users/me", json={"full_name": ""}, headers=auth_headers(alice)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
