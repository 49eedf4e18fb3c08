"""baseline content schema

Revision ID: 9c1d4e2a7b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "9c1d4e2a7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create accounts, posts, comments, reaction ledgers and sequences."""
    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("profile_picture", sa.Text(), nullable=True),
        sa.Column("badges", sa.JSON(), nullable=False),
        sa.Column("xp", sa.Integer(), nullable=False),
        sa.Column("banned_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("moderator", sa.Boolean(), nullable=False),
        sa.Column("verified_brown", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "sequence_counter",
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("value", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("name"),
    )
    op.create_table(
        "post",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("post_number", sa.Integer(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("verified_brown", sa.Boolean(), nullable=False),
        sa.Column("content_warning", sa.String(length=100), nullable=True),
        sa.Column("post_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("approved_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_by_id", sa.Integer(), nullable=True),
        sa.Column("needs_review", sa.Boolean(), nullable=False),
        sa.Column("approved", sa.Boolean(), nullable=False),
        sa.Column("comment_seq", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["approved_by_id"], ["user_account.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_post_number", "post", ["post_number"], unique=True)
    op.create_index("ix_post_post_time", "post", ["post_time"], unique=False)
    op.create_table(
        "comment",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("comment_number", sa.Integer(), nullable=False),
        sa.Column("parent_comment_number", sa.Integer(), nullable=False),
        sa.Column("parent_comment_id", sa.Integer(), nullable=True),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("post_number", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=True),
        sa.Column("needs_review", sa.Boolean(), nullable=False),
        sa.Column("approved", sa.Boolean(), nullable=False),
        sa.Column("comment_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["author_id"], ["user_account.id"]),
        sa.ForeignKeyConstraint(["parent_comment_id"], ["comment.id"]),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "comment_number", name="uq_comment_post_number"),
    )
    op.create_index("ix_comment_parent_comment_id", "comment", ["parent_comment_id"], unique=False)
    op.create_index("ix_comment_post_id", "comment", ["post_id"], unique=False)
    op.create_index("ix_comment_post_number", "comment", ["post_number"], unique=False)
    op.create_table(
        "post_reaction",
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("kind", sa.SmallInteger(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.CheckConstraint("kind BETWEEN 1 AND 6", name="ck_post_reaction_kind"),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"]),
        sa.PrimaryKeyConstraint("post_id", "kind", "user_id"),
    )
    op.create_index("ix_post_reaction_post_id", "post_reaction", ["post_id"], unique=False)
    op.create_table(
        "comment_reaction",
        sa.Column("comment_id", sa.Integer(), nullable=False),
        sa.Column("kind", sa.SmallInteger(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.CheckConstraint("kind BETWEEN 1 AND 6", name="ck_comment_reaction_kind"),
        sa.ForeignKeyConstraint(["comment_id"], ["comment.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"]),
        sa.PrimaryKeyConstraint("comment_id", "kind", "user_id"),
    )
    op.create_index(
        "ix_comment_reaction_comment_id", "comment_reaction", ["comment_id"], unique=False
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_comment_reaction_comment_id", table_name="comment_reaction")
    op.drop_table("comment_reaction")
    op.drop_index("ix_post_reaction_post_id", table_name="post_reaction")
    op.drop_table("post_reaction")
    op.drop_index("ix_comment_post_number", table_name="comment")
    op.drop_index("ix_comment_post_id", table_name="comment")
    op.drop_index("ix_comment_parent_comment_id", table_name="comment")
    op.drop_table("comment")
    op.drop_index("ix_post_post_time", table_name="post")
    op.drop_index("ix_post_post_number", table_name="post")
    op.drop_table("post")
    op.drop_table("sequence_counter")
    op.drop_table("user_account")
