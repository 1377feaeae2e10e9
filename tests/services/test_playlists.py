# mypy: ignore-errors
# tests/services/test_playlists.py
"""Tests for playlist ordering, ownership and visibility."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from loopfeed.models import Playlist, PlaylistItem
from loopfeed.services import playlists, post_service
from loopfeed.services.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from loopfeed.services.pagination import PageRequest


def _titles(view):
    return [item.post.title for item in view.posts]


def test_posts_keep_insertion_order(db_session, make_post, alice, bob) -> None:
    first = make_post(bob, title="first")
    second = make_post(alice, title="second", kind="short")
    playlist = playlists.create_playlist(db_session, owner_id=alice.id, title="  Mix  ").playlist
    assert playlist.title == "Mix"

    playlists.add_post(db_session, playlist.id, alice.id, second.id)
    view = playlists.add_post(db_session, playlist.id, alice.id, first.id)

    assert _titles(view) == ["second", "first"]
    positions = db_session.execute(
        select(PlaylistItem.position).order_by(PlaylistItem.position)
    ).scalars().all()
    assert positions == [0, 1]


def test_add_rules(db_session, make_post, alice, bob) -> None:
    video = make_post(bob)
    album = make_post(
        bob,
        kind="images",
        video_url=None,
        images=[{"url": "/static/media/images/a.jpg", "caption": ""}],
    )
    hidden = make_post(bob, is_public=False)
    playlist = playlists.create_playlist(db_session, owner_id=alice.id, title="Mix").playlist

    playlists.add_post(db_session, playlist.id, alice.id, video.id)
    with pytest.raises(ConflictError, match="already in this playlist"):
        playlists.add_post(db_session, playlist.id, alice.id, video.id)
    with pytest.raises(InvalidInputError, match="Only videos and shorts"):
        playlists.add_post(db_session, playlist.id, alice.id, album.id)
    with pytest.raises(NotFoundError, match="Post not found"):
        playlists.add_post(db_session, playlist.id, alice.id, hidden.id)
    with pytest.raises(ForbiddenError):
        playlists.add_post(db_session, playlist.id, bob.id, video.id)


def test_blank_title_is_rejected(db_session, alice) -> None:
    with pytest.raises(InvalidInputError, match="Title is required"):
        playlists.create_playlist(db_session, owner_id=alice.id, title="   ")


def test_remove_post(db_session, make_post, alice) -> None:
    one = make_post(alice, title="one")
    two = make_post(alice, title="two")
    three = make_post(alice, title="three")
    playlist = playlists.create_playlist(db_session, owner_id=alice.id, title="Mix").playlist
    for post in (one, two, three):
        playlists.add_post(db_session, playlist.id, alice.id, post.id)

    view = playlists.remove_post(db_session, playlist.id, alice.id, two.id)

    assert _titles(view) == ["one", "three"]
    with pytest.raises(NotFoundError, match="not in this playlist"):
        playlists.remove_post(db_session, playlist.id, alice.id, two.id)


def test_private_playlist_is_owner_only(db_session, make_post, alice, bob) -> None:
    playlist = playlists.create_playlist(
        db_session, owner_id=alice.id, title="Drafts", is_public=False
    ).playlist

    assert playlists.get_playlist(db_session, playlist.id, alice.id).playlist.id == playlist.id
    with pytest.raises(NotFoundError, match="Playlist not found"):
        playlists.get_playlist(db_session, playlist.id, bob.id)
    with pytest.raises(NotFoundError):
        playlists.get_playlist(db_session, playlist.id, None)
    with pytest.raises(NotFoundError):
        playlists.add_post(db_session, playlist.id, bob.id, make_post(bob).id)


def test_posts_made_private_later_are_hidden_from_others(
    db_session, make_post, alice, bob
) -> None:
    own = make_post(alice, title="mine")
    playlist = playlists.create_playlist(db_session, owner_id=alice.id, title="Mix").playlist
    playlists.add_post(db_session, playlist.id, alice.id, own.id)
    own.is_public = False
    db_session.commit()

    assert _titles(playlists.get_playlist(db_session, playlist.id, alice.id)) == ["mine"]
    assert _titles(playlists.get_playlist(db_session, playlist.id, bob.id)) == []


def test_list_user_playlists_hides_private_from_others(db_session, alice, bob) -> None:
    playlists.create_playlist(db_session, owner_id=alice.id, title="Public")
    playlists.create_playlist(db_session, owner_id=alice.id, title="Private", is_public=False)

    own = playlists.list_user_playlists(db_session, alice.id, PageRequest(), alice.id)
    other = playlists.list_user_playlists(db_session, alice.id, PageRequest(), bob.id)

    assert sorted(item.title for item in own.items) == ["Private", "Public"]
    assert [item.title for item in other.items] == ["Public"]


def test_deleting_post_drops_it_from_playlists(db_session, make_post, alice, bob) -> None:
    post = make_post(bob)
    playlist = playlists.create_playlist(db_session, owner_id=alice.id, title="Mix").playlist
    playlists.add_post(db_session, playlist.id, alice.id, post.id)

    post_service.delete_post(db_session, post.id, bob.id)

    assert db_session.execute(select(PlaylistItem)).first() is None
    assert playlists.get_playlist(db_session, playlist.id, alice.id).posts == []


def test_delete_playlist(db_session, make_post, alice, bob) -> None:
    playlist = playlists.create_playlist(db_session, owner_id=alice.id, title="Mix").playlist
    playlists.add_post(db_session, playlist.id, alice.id, make_post(alice).id)
    playlist_id = playlist.id

    with pytest.raises(ForbiddenError):
        playlists.delete_playlist(db_session, playlist_id, bob.id)
    playlists.delete_playlist(db_session, playlist_id, alice.id)

    assert db_session.get(Playlist, playlist_id) is None
    assert db_session.execute(select(PlaylistItem)).first() is None
