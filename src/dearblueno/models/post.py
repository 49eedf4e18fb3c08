# src/dearblueno/models/post.py
"""SQLAlchemy model for submitted posts."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from dearblueno.db.session import Base
from dearblueno.db.time import utcnow
from dearblueno.models.moderation import ModerationState


class Post(Base):
    """Anonymous submission awaiting or past moderation.

    ``id`` is the internal handle moderators use; the public ``post_number``
    is claimed once, on first approval, from the global post sequence.
    """

    __tablename__ = "post"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    post_number: Mapped[int | None] = mapped_column(
        Integer, nullable=True, unique=True, index=True
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)
    verified_brown: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    content_warning: Mapped[str | None] = mapped_column(String(100), nullable=True)

    post_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    approved_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=True,
    )

    # Pending: needs_review and not approved. Rejected: neither flag set.
    needs_review: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Per-post counter backing comment numbers; only ever incremented.
    comment_seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @property
    def moderation_state(self) -> ModerationState:
        return ModerationState.from_flags(needs_review=self.needs_review, approved=self.approved)
