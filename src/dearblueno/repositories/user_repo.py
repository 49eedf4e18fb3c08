"""Data access helpers for the account records this core reads and credits."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import exists, select, update
from sqlalchemy.orm import Session

from dearblueno.models.comment import Comment
from dearblueno.models.user import User

__all__ = ["UserRepository", "DISPLAY_FIELDS"]

# The only user columns ever exposed alongside content.
DISPLAY_FIELDS = ("name", "profile_picture", "badges")


class UserRepository:
    """Read display projections and apply XP deltas."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def display_fields(self, user_ids: Iterable[int]) -> dict[int, dict[str, Any]]:
        """Return ``{user_id: {name, profile_picture, badges}}`` for the given ids."""
        ids = {user_id for user_id in user_ids if user_id is not None}
        if not ids:
            return {}
        stmt = select(User.id, User.name, User.profile_picture, User.badges).where(
            User.id.in_(ids)
        )
        return {
            row.id: {
                "name": row.name,
                "profile_picture": row.profile_picture,
                "badges": list(row.badges or []),
            }
            for row in self.session.execute(stmt)
        }

    def adjust_xp(self, user_id: int, delta: int) -> None:
        """Apply ``delta`` to a user's XP as a single in-database increment."""
        if delta == 0:
            return
        self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(xp=User.xp + delta)
            .execution_options(synchronize_session=False)
        )
        self._expire_xp(user_id)

    def credit_comment_author(self, user_id: int, comment_id: int, delta: int) -> bool:
        """Apply ``delta`` only while ``user_id`` is the live author of ``comment_id``.

        Returns False when the comment has been deleted or lost its author, in
        which case its XP has already been settled.
        """
        if delta == 0:
            return False
        authored = exists().where(
            Comment.id == comment_id,
            Comment.author_id == user_id,
            Comment.deleted_at.is_(None),
        )
        result = self.session.execute(
            update(User)
            .where(User.id == user_id, authored)
            .values(xp=User.xp + delta)
            .execution_options(synchronize_session=False)
        )
        self._expire_xp(user_id)
        return result.rowcount == 1

    def _expire_xp(self, user_id: int) -> None:
        # Loaded instances would otherwise keep the stale value.
        cached = self.session.identity_map.get(self.session.identity_key(User, user_id))
        if cached is not None:
            self.session.expire(cached, ["xp"])
