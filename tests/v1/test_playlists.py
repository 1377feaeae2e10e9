# mypy: ignore-errors
# tests/v1/test_playlists.py
"""Tests for playlist endpoints."""

from __future__ import annotations

from fastapi import status


def _create(client, headers, **payload):
    body = {"title": "Road trip"}
    body.update(payload)
    response = client.post("/api/v1/playlists", json=body, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_create_add_remove(client, make_post, alice, bob, auth_headers) -> None:
    headers = auth_headers(alice)
    clip = make_post(bob, title="clip", kind="short")
    playlist = _create(client, headers, description="songs")
    assert playlist["posts"] == []
    assert playlist["owner"]["id"] == alice.id

    added = client.post(
        f"/api/v1/playlists/{playlist['id']}/add", json={"post_id": clip.id}, headers=headers
    )
    assert added.status_code == status.HTTP_200_OK
    assert [item["title"] for item in added.json()["posts"]] == ["clip"]
    assert added.json()["posts_count"] == 1

    again = client.post(
        f"/api/v1/playlists/{playlist['id']}/add", json={"post_id": clip.id}, headers=headers
    )
    assert again.status_code == status.HTTP_409_CONFLICT

    removed = client.post(
        f"/api/v1/playlists/{playlist['id']}/remove", json={"post_id": clip.id}, headers=headers
    )
    assert removed.json()["posts"] == []


def test_only_owner_can_modify(client, post, alice, bob, auth_headers) -> None:
    playlist = _create(client, auth_headers(alice))

    response = client.post(
        f"/api/v1/playlists/{playlist['id']}/add",
        json={"post_id": post.id},
        headers=auth_headers(bob),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.delete(f"/api/v1/playlists/{playlist['id']}", headers=auth_headers(bob))
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.delete(f"/api/v1/playlists/{playlist['id']}", headers=auth_headers(alice))
    assert response.json()["message"] == "Playlist deleted successfully"
    assert client.get(f"/api/v1/playlists/{playlist['id']}").status_code == 404


def test_private_playlist_visibility(client, alice, bob, auth_headers) -> None:
    playlist = _create(client, auth_headers(alice), is_public=False)

    assert client.get(f"/api/v1/playlists/{playlist['id']}").status_code == 404
    as_bob = client.get(f"/api/v1/playlists/{playlist['id']}", headers=auth_headers(bob))
    assert as_bob.status_code == status.HTTP_404_NOT_FOUND
    as_alice = client.get(f"/api/v1/playlists/{playlist['id']}", headers=auth_headers(alice))
    assert as_alice.status_code == status.HTTP_200_OK

    listed = client.get(f"/api/v1/playlists/user/{alice.id}").json()
    assert listed["data"] == []
    own = client.get(f"/api/v1/playlists/user/{alice.id}", headers=auth_headers(alice)).json()
    assert [item["title"] for item in own["data"]] == ["Road trip"]


def test_playlist_requires_auth_to_create(client) -> None:
    response = client.post("/api/v1/playlists", json={"title": "x"})
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}
