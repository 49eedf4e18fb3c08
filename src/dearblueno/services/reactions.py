"""Reaction ledger operations for posts and comments."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from dearblueno.core.errors import NotFoundError
from dearblueno.models import Comment, Post, ReactionKind
from dearblueno.repositories import (
    CommentRepository,
    PostRepository,
    ReactionRepository,
    UserRepository,
)
from dearblueno.services.xp import AuthoredComment, XPEconomy, authorship_of

logger = logging.getLogger(__name__)


class ReactionLedger:
    """Idempotent reaction toggles.

    Each toggle is one conditional insert or delete of an
    ``(entity, kind, user)`` row. For comments, the author's XP delta is
    applied in the same transaction, and only when the row actually changed.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.posts = PostRepository(db)
        self.comments = CommentRepository(db)
        self.post_reactions = ReactionRepository.for_posts(db)
        self.comment_reactions = ReactionRepository.for_comments(db)
        self.xp = XPEconomy(UserRepository(db))

    @staticmethod
    def _toggle(
        repo: ReactionRepository,
        entity_id: object,
        kind: ReactionKind,
        user_id: int,
        desired: bool,
    ) -> bool:
        if desired:
            return repo.add(entity_id, kind, user_id)
        return repo.remove(entity_id, kind, user_id)

    def get_visible_post(self, post_number: int, *, for_update: bool = False) -> Post:
        post = self.posts.get_approved_by_number(post_number, for_update=for_update)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def get_visible_comment(
        self,
        post_number: int,
        comment_number: int,
        *,
        for_update: bool = False,
    ) -> Comment:
        self.get_visible_post(post_number)
        comment = self.comments.get_by_post_number(
            post_number, comment_number, for_update=for_update
        )
        if comment is None or not comment.approved:
            raise NotFoundError("Comment not found")
        return comment

    def set_post_reaction(
        self,
        post_number: int,
        kind: int,
        user_id: int,
        desired: bool,
    ) -> Post:
        """Add or remove ``user_id`` from one reaction slot of a post."""
        reaction = ReactionKind(kind)
        post = self.get_visible_post(post_number, for_update=True)
        changed = self._toggle(self.post_reactions, post.id, reaction, user_id, desired)
        self.db.commit()
        logger.debug(
            "Post %d reaction %s by user %s -> %s (changed=%s)",
            post_number,
            reaction.name,
            user_id,
            desired,
            changed,
        )
        return post

    def set_comment_reaction(
        self,
        post_number: int,
        comment_number: int,
        kind: int,
        user_id: int,
        desired: bool,
    ) -> Comment:
        """Add or remove ``user_id`` from one reaction slot of a comment.

        The comment row is locked for the duration, so a concurrent deletion
        either settles after this toggle or makes the comment unreactable
        before it.
        """
        reaction = ReactionKind(kind)
        comment = self.get_visible_comment(post_number, comment_number, for_update=True)
        changed = self._toggle(self.comment_reactions, comment.id, reaction, user_id, desired)

        if changed:
            authorship = authorship_of(comment)
            if isinstance(authorship, AuthoredComment):
                self.xp.apply_reaction(authorship, reaction, added=desired)

        self.db.commit()
        logger.debug(
            "Comment %d/%d reaction %s by user %s -> %s (changed=%s)",
            post_number,
            comment_number,
            reaction.name,
            user_id,
            desired,
            changed,
        )
        return comment

    def post_ledger(self, post_number: int) -> list[list[int]]:
        """Return the reactor ids of a visible post, one list per kind."""
        post = self.get_visible_post(post_number)
        return self.post_reactions.ledger(post.id)

    def comment_ledger(self, post_number: int, comment_number: int) -> list[list[int]]:
        """Return the reactor ids of a visible comment, one list per kind."""
        comment = self.get_visible_comment(post_number, comment_number)
        return self.comment_reactions.ledger(comment.id)
