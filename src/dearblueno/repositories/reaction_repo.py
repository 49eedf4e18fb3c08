"""Set-membership primitives over the reaction ledger tables."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dearblueno.models.reaction import REACTION_KINDS, CommentReaction, PostReaction

__all__ = ["ReactionRepository", "empty_ledger"]

Ledger = list[list[int]]


def empty_ledger() -> Ledger:
    """Return a ledger with one empty slot per reaction kind."""
    return [[] for _ in REACTION_KINDS]


class ReactionRepository:
    """Reaction storage for one entity type.

    Every mutation touches exactly one ``(entity, kind, user)`` row, so
    concurrent reactions from different users never overwrite each other.
    """

    def __init__(self, session: Session, model: type[PostReaction] | type[CommentReaction]) -> None:
        self.session = session
        self.model = model
        self.key = model.post_id if model is PostReaction else model.comment_id

    @classmethod
    def for_posts(cls, session: Session) -> ReactionRepository:
        return cls(session, PostReaction)

    @classmethod
    def for_comments(cls, session: Session) -> ReactionRepository:
        return cls(session, CommentReaction)

    def add(self, entity_id: Any, kind: int, user_id: int) -> bool:
        """Insert a membership row; return False when it already existed."""
        try:
            with self.session.begin_nested():
                self.session.execute(
                    insert(self.model).values(
                        {self.key.key: entity_id, "kind": kind, "user_id": user_id}
                    )
                )
        except IntegrityError:
            return False
        return True

    def remove(self, entity_id: Any, kind: int, user_id: int) -> bool:
        """Delete a membership row; return False when it was not present."""
        result = self.session.execute(
            delete(self.model).where(
                self.key == entity_id,
                self.model.kind == kind,
                self.model.user_id == user_id,
            )
        )
        return result.rowcount == 1

    def count_kinds(self, entity_id: Any, kinds: Iterable[int]) -> int:
        """Return the total membership across ``kinds`` for one entity."""
        stmt = select(func.count()).select_from(self.model).where(
            self.key == entity_id,
            self.model.kind.in_(list(kinds)),
        )
        return int(self.session.execute(stmt).scalar() or 0)

    def ledgers(self, entity_ids: Iterable[Any]) -> dict[Any, Ledger]:
        """Return ``{entity_id: ledger}``; entities with no reactions get empty slots."""
        ids = list(entity_ids)
        ledgers: dict[Any, Ledger] = {entity_id: empty_ledger() for entity_id in ids}
        if not ids:
            return ledgers

        stmt = (
            select(self.key, self.model.kind, self.model.user_id)
            .where(self.key.in_(ids))
            .order_by(self.model.kind, self.model.user_id)
        )
        for entity_id, kind, user_id in self.session.execute(stmt):
            ledgers[entity_id][kind - 1].append(user_id)
        return ledgers

    def ledger(self, entity_id: Any) -> Ledger:
        return self.ledgers([entity_id])[entity_id]
