# src/dearblueno/models/reaction.py
"""Reaction ledger rows for posts and comments."""

from __future__ import annotations

import uuid
from enum import IntEnum

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, SmallInteger, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from dearblueno.db.session import Base


class ReactionKind(IntEnum):
    """The six reaction slots, in canonical ledger order."""

    LIKE = 1
    HEART = 2
    LAUGH = 3
    CRY = 4
    ANGRY = 5
    SURPRISE = 6


REACTION_KINDS: tuple[ReactionKind, ...] = tuple(ReactionKind)
# Kinds that move XP on comment authors.
POSITIVE_KINDS: frozenset[ReactionKind] = frozenset(
    {ReactionKind.LIKE, ReactionKind.HEART, ReactionKind.LAUGH}
)


class PostReaction(Base):
    """Membership of one user in one reaction slot of a post.

    The composite primary key makes each (post, kind, user) tuple a set member.
    """

    __tablename__ = "post_reaction"
    __table_args__ = (
        CheckConstraint("kind BETWEEN 1 AND 6", name="ck_post_reaction_kind"),
        Index("ix_post_reaction_post_id", "post_id"),
    )

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    kind: Mapped[int] = mapped_column(SmallInteger, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        primary_key=True,
    )


class CommentReaction(Base):
    """Membership of one user in one reaction slot of a comment."""

    __tablename__ = "comment_reaction"
    __table_args__ = (
        CheckConstraint("kind BETWEEN 1 AND 6", name="ck_comment_reaction_kind"),
        Index("ix_comment_reaction_comment_id", "comment_id"),
    )

    comment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("comment.id", ondelete="CASCADE"),
        primary_key=True,
    )
    kind: Mapped[int] = mapped_column(SmallInteger, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        primary_key=True,
    )
