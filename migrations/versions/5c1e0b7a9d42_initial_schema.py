"""initial schema

Revision ID: 5c1e0b7a9d42
Revises:
Create Date: 2026-10-19 09:12:44.318201

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e0b7a9d42"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SINGLE_AUTHOR = (
    "(author_type = 'USER' AND user_author_id IS NOT NULL AND bot_author_id IS NULL)"
    " OR "
    "(author_type = 'BOT' AND bot_author_id IS NOT NULL AND user_author_id IS NULL)"
)


def _author_columns() -> list[sa.Column]:
    return [
        sa.Column("author_type", sa.String(length=8), nullable=False),
        sa.Column("user_author_id", sa.String(length=64), sa.ForeignKey("user_account.id"), nullable=True),
        sa.Column("bot_author_id", sa.Integer(), sa.ForeignKey("bot.id"), nullable=True),
    ]


def upgrade() -> None:
    """Create users, bots, posts, tags, comments, reactions and bookmarks."""
    op.create_table(
        "user_account",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "bot",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("api_key_hash", sa.String(length=64), nullable=False),
        sa.Column("api_key_hint", sa.String(length=4), nullable=False),
        sa.Column("trusted", sa.Boolean(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("can_draft", sa.Boolean(), nullable=False),
        sa.Column("can_publish", sa.Boolean(), nullable=False),
        sa.Column("can_comment", sa.Boolean(), nullable=False),
        sa.Column("owner_id", sa.String(length=64), sa.ForeignKey("user_account.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("api_key_hash"),
    )
    op.create_index("ix_bot_owner_id", "bot", ["owner_id"])

    op.create_table(
        "tag",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("slug", sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_table(
        "post",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("slug", sa.String(length=150), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("format", sa.String(length=16), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        *_author_columns(),
        sa.Column("owner_id", sa.String(length=64), sa.ForeignKey("user_account.id"), nullable=False),
        sa.Column("view_count", sa.Integer(), nullable=False),
        sa.Column("pinned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
        sa.CheckConstraint(SINGLE_AUTHOR, name="ck_post_single_author"),
    )
    op.create_index("ix_post_status", "post", ["status"])
    op.create_index("ix_post_owner_id", "post", ["owner_id"])
    op.create_index("ix_post_user_author_id", "post", ["user_author_id"])
    op.create_index("ix_post_bot_author_id", "post", ["bot_author_id"])
    op.create_index("ix_post_status_published_at", "post", ["status", "published_at"])

    op.create_table(
        "post_tag",
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("post.id", ondelete="CASCADE"), nullable=False),
        sa.Column("tag_id", sa.Integer(), sa.ForeignKey("tag.id", ondelete="CASCADE"), nullable=False),
        sa.PrimaryKeyConstraint("post_id", "tag_id"),
    )
    op.create_table(
        "comment",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("post.id", ondelete="CASCADE"), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        *_author_columns(),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(SINGLE_AUTHOR, name="ck_comment_single_author"),
    )
    op.create_index("ix_comment_post_id", "comment", ["post_id"])
    op.create_index("ix_comment_user_author_id", "comment", ["user_author_id"])
    op.create_index("ix_comment_bot_author_id", "comment", ["bot_author_id"])

    op.create_table(
        "reaction",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("user_id", sa.String(length=64), sa.ForeignKey("user_account.id"), nullable=False),
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("post.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "post_id", "type", name="uq_reaction_user_post_type"),
    )
    op.create_index("ix_reaction_post_id", "reaction", ["post_id"])

    op.create_table(
        "bookmark",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=64), sa.ForeignKey("user_account.id"), nullable=False),
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("post.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_bookmark_user_post"),
    )
    op.create_index("ix_bookmark_user_id", "bookmark", ["user_id"])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_bookmark_user_id", table_name="bookmark")
    op.drop_table("bookmark")
    op.drop_index("ix_reaction_post_id", table_name="reaction")
    op.drop_table("reaction")
    op.drop_index("ix_comment_bot_author_id", table_name="comment")
    op.drop_index("ix_comment_user_author_id", table_name="comment")
    op.drop_index("ix_comment_post_id", table_name="comment")
    op.drop_table("comment")
    op.drop_table("post_tag")
    op.drop_index("ix_post_status_published_at", table_name="post")
    op.drop_index("ix_post_bot_author_id", table_name="post")
    op.drop_index("ix_post_user_author_id", table_name="post")
    op.drop_index("ix_post_owner_id", table_name="post")
    op.drop_index("ix_post_status", table_name="post")
    op.drop_table("post")
    op.drop_table("tag")
    op.drop_index("ix_bot_owner_id", table_name="bot")
    op.drop_table("bot")
    op.drop_table("user_account")
