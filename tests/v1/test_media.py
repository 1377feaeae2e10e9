# mypy: ignore-errors
# tests/v1/test_media.py
"""Tests for media uploads."""

from __future__ import annotations

from fastapi import status


def test_upload_stores_file_and_returns_url(client, alice, auth_headers, media_storage) -> None:
    response = client.post(
        "/api/v1/media",
        files={"file": ("../../My Clip!.mp4", b"fake-video-bytes", "video/mp4")},
        data={"folder": "videos"},
        headers=auth_headers(alice),
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()

    assert data["url"].startswith("/static/media/videos/")
    assert data["filename"].endswith("My_Clip_.mp4")
    assert data["size"] == len(b"fake-video-bytes")
    stored = media_storage.root / "videos" / data["filename"]
    assert stored.read_bytes() == b"fake-video-bytes"


def test_upload_limits(client, alice, auth_headers, media_storage) -> None:
    headers = auth_headers(alice)
    too_big = client.post(
        "/api/v1/media",
        files={"file": ("big.jpg", b"x" * 2048, "image/jpeg")},
        headers=headers,
    )
    assert too_big.status_code == status.HTTP_400_BAD_REQUEST

    empty = client.post(
        "/api/v1/media", files={"file": ("empty.jpg", b"", "image/jpeg")}, headers=headers
    )
    assert empty.status_code == status.HTTP_400_BAD_REQUEST

    bad_folder = client.post(
        "/api/v1/media",
        files={"file": ("a.jpg", b"abc", "image/jpeg")},
        data={"folder": "../etc"},
        headers=headers,
    )
    assert bad_folder.status_code == status.HTTP_400_BAD_REQUEST


def test_upload_requires_auth(client, media_storage) -> None:
    response = client.post("/api/v1/media", files={"file": ("a.jpg", b"abc", "image/jpeg")})
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_storage_failure_is_internal_error(
    client, alice, auth_headers, media_storage, mocker
) -> None:
    mocker.patch("pathlib.Path.write_bytes", side_effect=OSError("disk full"))

    response = client.post(
        "/api/v1/media",
        files={"file": ("a.jpg", b"abc", "image/jpeg")},
        headers=auth_headers(alice),
    )
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["kind"] == "internal"
