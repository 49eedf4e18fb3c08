# src/dearblueno/models/user.py
"""Account records owned by the authentication collaborator."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from dearblueno.db.session import Base
from dearblueno.db.time import utcnow


class User(Base):
    """Authenticated member.

    Only ``xp`` is written by the content core; the remaining columns belong
    to the account service and are read for display and entitlement checks.
    """

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_picture: Mapped[str | None] = mapped_column(Text, nullable=True)
    badges: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Reputation; may go negative.
    xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    banned_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    moderator: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verified_brown: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
