"""Data access helpers for working with comments."""
from __future__ import annotations

import uuid
from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from sqlalchemy import exists, select, update
from sqlalchemy.orm import Session

from dearblueno.models.comment import Comment

__all__ = ["CommentRepository"]


class CommentRepository:
    """Thin wrapper around database access for comment entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, comment_id: int) -> Comment | None:
        return self.session.get(Comment, comment_id)

    def get_by_number(
        self,
        post_id: uuid.UUID,
        comment_number: int,
        *,
        for_update: bool = False,
    ) -> Comment | None:
        """Return a comment addressed by owning post id and comment number."""
        stmt = select(Comment).where(
            Comment.post_id == post_id,
            Comment.comment_number == comment_number,
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalars().first()

    def get_by_post_number(
        self,
        post_number: int,
        comment_number: int,
        *,
        for_update: bool = False,
    ) -> Comment | None:
        """Return a comment addressed by public post number and comment number."""
        stmt = select(Comment).where(
            Comment.post_number == post_number,
            Comment.comment_number == comment_number,
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalars().first()

    def add(self, comment: Comment) -> Comment:
        self.session.add(comment)
        self.session.flush()
        return comment

    def has_children(self, comment_id: int) -> bool:
        """Return True if any other comment names this one as its parent."""
        stmt = select(
            exists().where(
                Comment.parent_comment_id == comment_id,
                Comment.id != comment_id,
            )
        )
        return bool(self.session.execute(stmt).scalar())

    def mark_deleted(
        self,
        comment_id: int,
        author_id: int,
        deleted_at: datetime,
        changes: dict[str, Any],
    ) -> bool:
        """Apply an author deletion unless the comment was already deleted.

        The guard on ``deleted_at``, ``approved`` and ``author_id`` makes the
        transition happen at most once even when two deletions race.
        """
        result = self.session.execute(
            update(Comment)
            .where(
                Comment.id == comment_id,
                Comment.author_id == author_id,
                Comment.approved.is_(True),
                Comment.deleted_at.is_(None),
            )
            .values(deleted_at=deleted_at, **changes)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def list_for_posts(
        self,
        post_ids: Iterable[uuid.UUID],
        *,
        approved_only: bool = True,
    ) -> dict[uuid.UUID, list[Comment]]:
        """Return comments grouped by post, each group ordered by comment number."""
        ids = list(post_ids)
        grouped: dict[uuid.UUID, list[Comment]] = defaultdict(list)
        if not ids:
            return grouped

        stmt = select(Comment).where(Comment.post_id.in_(ids))
        if approved_only:
            stmt = stmt.where(Comment.approved.is_(True))
        stmt = stmt.order_by(Comment.post_id, Comment.comment_number)
        for comment in self.session.execute(stmt).scalars():
            grouped[comment.post_id].append(comment)
        return grouped

    def list_pending(self, *, page: int, page_size: int) -> list[Comment]:
        """Return comments awaiting review, oldest first."""
        stmt = (
            select(Comment)
            .where(Comment.needs_review.is_(True))
            .order_by(Comment.comment_time.asc(), Comment.id.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(self.session.execute(stmt).scalars())
