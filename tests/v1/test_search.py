# mypy: ignore-errors
# tests/v1/test_search.py
"""Tests for search endpoints."""

from __future__ import annotations

from fastapi import status


def test_search_users_case_insensitive(client, make_user) -> None:
    make_user("skater_kid", full_name="Tony Hawk")
    make_user("baker", full_name="Mary Berry")

    by_handle = client.get("/api/v1/search/users", params={"q": "SKATER"}).json()
    assert [user["username"] for user in by_handle["data"]] == ["skater_kid"]

    by_name = client.get("/api/v1/search/users", params={"q": "berry"}).json()
    assert [user["username"] for user in by_name["data"]] == ["baker"]


def test_search_wildcards_are_literal(client, make_user) -> None:
    make_user("plain")
    make_user("under_score")

    body = client.get("/api/v1/search/users", params={"q": "_"}).json()
    assert [user["username"] for user in body["data"]] == ["under_score"]

    assert client.get("/api/v1/search/users", params={"q": "%"}).json()["data"] == []


def test_search_posts_matches_title_description_and_tags(client, make_post, alice) -> None:
    make_post(alice, title="Guitar lesson")
    make_post(alice, title="Untitled", description="learn GUITAR chords")
    make_post(alice, title="Jam", tags=["guitar"])
    make_post(alice, title="Cooking")
    make_post(alice, title="Secret guitar", is_public=False)

    body = client.get("/api/v1/search/posts", params={"q": "guitar"}).json()

    assert sorted(item["title"] for item in body["data"]) == ["Guitar lesson", "Jam", "Untitled"]


def test_search_posts_kind_filter(client, make_post, alice) -> None:
    make_post(alice, title="dance video")
    make_post(alice, title="dance short", kind="short")

    body = client.get("/api/v1/search/posts", params={"q": "dance", "kind": "short"}).json()
    assert [item["title"] for item in body["data"]] == ["dance short"]


def test_search_all(client, make_user, make_post) -> None:
    surfer = make_user("surfer")
    make_post(surfer, title="Big waves")

    body = client.get("/api/v1/search/all", params={"q": "surf"}).json()
    assert [user["username"] for user in body["users"]["data"]] == ["surfer"]
    assert body["posts"]["data"] == []

    body = client.get("/api/v1/search/all", params={"q": "waves"}).json()
    assert [item["title"] for item in body["posts"]["data"]] == ["Big waves"]


def test_empty_query_is_rejected(client) -> None:
    for path in ("/api/v1/search/users", "/api/v1/search/posts", "/api/v1/search/all"):
        response = client.get(path, params={"q": "   "})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["kind"] == "validation_error"


def test_tag_search_matches_tag_values(client, make_post, alice) -> None:
    """Tags are matched one by one, so punctuation between them never matches."""
    make_post(alice, title="Brunch", tags=["Café", "Crème brûlée"])
    make_post(alice, title="Letters", tags=["a", "b"])

    accented = client.get("/api/v1/search/posts", params={"q": "café"}).json()
    assert [item["title"] for item in accented["data"]] == ["Brunch"]
    assert accented["data"][0]["tags"] == ["Café", "Crème brûlée"]

    partial = client.get("/api/v1/search/posts", params={"q": "BRÛL"}).json()
    assert [item["title"] for item in partial["data"]] == ["Brunch"]

    punctuation = client.get("/api/v1/search/posts", params={"q": '", "'}).json()
    assert punctuation["data"] == []
