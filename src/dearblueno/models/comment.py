# src/dearblueno/models/comment.py
"""SQLAlchemy model for threaded comments."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from dearblueno.db.session import Base
from dearblueno.db.time import utcnow
from dearblueno.models.moderation import ModerationState

TOP_LEVEL_PARENT = -1


class Comment(Base):
    """A numbered node in a post's comment tree.

    A null ``author_id`` means the comment was posted anonymously or was
    deleted while it still had replies. ``deleted_at`` is set once, when the
    author deletes the comment and its XP is settled.
    """

    __tablename__ = "comment"
    __table_args__ = (
        UniqueConstraint("post_id", "comment_number", name="uq_comment_post_number"),
        Index("ix_comment_parent_comment_id", "parent_comment_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    comment_number: Mapped[int] = mapped_column(Integer, nullable=False)
    parent_comment_number: Mapped[int] = mapped_column(
        Integer, nullable=False, default=TOP_LEVEL_PARENT
    )
    parent_comment_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comment.id"),
        nullable=True,
    )

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("post.id"),
        nullable=False,
        index=True,
    )
    # Denormalized for addressing by (post_number, comment_number).
    post_number: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=True,
    )

    needs_review: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    comment_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def moderation_state(self) -> ModerationState:
        return ModerationState.from_flags(needs_review=self.needs_review, approved=self.approved)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_top_level(self) -> bool:
        return self.parent_comment_number == TOP_LEVEL_PARENT
