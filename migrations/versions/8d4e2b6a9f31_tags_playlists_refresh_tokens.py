"""post tags, playlists and refresh tokens

Revision ID: 8d4e2b6a9f31
Revises: 3c1f9a7e2b10
Create Date: 2026-10-19 15:40:02.118934

"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8d4e2b6a9f31"
down_revision: Union[str, Sequence[str], None] = "3c1f9a7e2b10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add the searchable tag table, playlists and the refresh token column."""
    post_tag = op.create_table(
        "post_tag",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("tag", sa.Text(), nullable=False),
        sa.Column("tag_key", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_tag_key", "post_tag", ["tag_key"])
    op.create_index("ix_post_tag_post_id", "post_tag", ["post_id"])

    # Existing posts keep their tags in post.tags; copy them out row by row.
    post = sa.table("post", sa.column("id", sa.Integer()), sa.column("tags", sa.JSON()))
    rows = [
        {"post_id": post_id, "tag": tag, "tag_key": tag.casefold()}
        for post_id, tags in op.get_bind().execute(sa.select(post.c.id, post.c.tags))
        for tag in tags or []
    ]
    if rows:
        op.bulk_insert(post_tag, rows)

    op.create_table(
        "playlist",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_playlist_owner_created", "playlist", ["owner_id", "created_at"])

    op.create_table(
        "playlist_item",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("playlist_id", sa.Integer(), nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("added_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["playlist_id"], ["playlist.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("playlist_id", "post_id", name="uq_playlist_item_post"),
    )
    op.create_index("ix_playlist_item_post_id", "playlist_item", ["post_id"])

    with op.batch_alter_table("user_account") as batch_op:
        batch_op.add_column(sa.Column("refresh_token_id", sa.String(length=64), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("user_account") as batch_op:
        batch_op.drop_column("refresh_token_id")

    op.drop_index("ix_playlist_item_post_id", table_name="playlist_item")
    op.drop_table("playlist_item")
    op.drop_index("ix_playlist_owner_created", table_name="playlist")
    op.drop_table("playlist")
    op.drop_index("ix_post_tag_post_id", table_name="post_tag")
    op.drop_index("ix_post_tag_key", table_name="post_tag")
    op.drop_table("post_tag")
