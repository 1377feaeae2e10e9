# mypy: ignore-errors
# tests/services/test_post_tags.py
"""The searchable tag rows follow the post's tag list."""

from __future__ import annotations

from sqlalchemy import select

from loopfeed.models import PostTag
from loopfeed.services import post_service


def _tag_rows(db, post_id):
    return db.execute(
        select(PostTag.tag, PostTag.tag_key).where(PostTag.post_id == post_id).order_by(PostTag.id)
    ).all()


def test_created_post_gets_one_row_per_tag(db_session, alice) -> None:
    view = post_service.create_post(
        db_session,
        owner_id=alice.id,
        kind="video",
        title="Trip",
        video_url="/static/media/videos/trip.mp4",
        tags=[" Straße ", "", "Berlin"],
    )

    assert view.post.tags == ["Straße", "Berlin"]
    assert _tag_rows(db_session, view.post.id) == [
        ("Straße", "strasse"),
        ("Berlin", "berlin"),
    ]


def test_replacing_tags_replaces_rows(db_session, make_post, alice) -> None:
    post = make_post(alice, tags=["one", "two"])

    post.tags = ["three"]
    db_session.commit()

    assert _tag_rows(db_session, post.id) == [("three", "three")]


def test_deleting_post_removes_tag_rows(db_session, make_post, alice) -> None:
    post = make_post(alice, tags=["gone"])
    post_id = post.id

    post_service.delete_post(db_session, post_id, alice.id)

    assert _tag_rows(db_session, post_id) == []
