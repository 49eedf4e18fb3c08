"""Reputation (XP) bookkeeping driven by comment lifecycle events.

XP is never recomputed from scratch: it is the running sum of the deltas
applied here. Creation awards a fixed amount, each positive reaction
add/remove moves it by one, and deletion settles the comment's whole
contribution back to zero.

Only :class:`AuthoredComment` values are accepted, so anonymous comments
have no path into the economy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from dearblueno.core.settings import settings
from dearblueno.models.comment import Comment
from dearblueno.models.reaction import POSITIVE_KINDS
from dearblueno.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthoredComment:
    """A comment credited to a known author."""

    comment_id: int
    author_id: int


@dataclass(frozen=True)
class AnonymousComment:
    """A comment with no author: posted anonymously or deleted with replies."""

    comment_id: int


CommentAuthorship = AuthoredComment | AnonymousComment


def authorship_of(comment: Comment) -> CommentAuthorship:
    """Lift the nullable storage column into an explicit variant."""
    if comment.author_id is None:
        return AnonymousComment(comment_id=comment.id)
    return AuthoredComment(comment_id=comment.id, author_id=comment.author_id)


class XPEconomy:
    """Apply XP deltas to comment authors."""

    def __init__(self, users: UserRepository, *, creation_award: int | None = None) -> None:
        self.users = users
        self.creation_award = (
            settings.xp_comment_award if creation_award is None else creation_award
        )

    def award_creation(self, comment: AuthoredComment) -> int:
        """Credit the author for writing a comment."""
        self.users.adjust_xp(comment.author_id, self.creation_award)
        logger.debug(
            "Awarded %d XP to user %s for comment %s",
            self.creation_award,
            comment.author_id,
            comment.comment_id,
        )
        return self.creation_award

    def apply_reaction(self, comment: AuthoredComment, kind: int, *, added: bool) -> int:
        """Move the author's XP by one for a positive reaction change.

        Nothing is applied once the comment has been deleted, since deletion
        already settled everything the comment earned.
        """
        if kind not in POSITIVE_KINDS:
            return 0
        delta = 1 if added else -1
        if not self.users.credit_comment_author(comment.author_id, comment.comment_id, delta):
            return 0
        logger.debug(
            "Reaction kind %d %s on comment %s: XP %+d for user %s",
            kind,
            "added" if added else "removed",
            comment.comment_id,
            delta,
            comment.author_id,
        )
        return delta

    def settle_deletion(self, comment: AuthoredComment, positive_reactions: int) -> int:
        """Reverse everything the comment earned.

        Args:
            comment: The comment being deleted, captured before its author is cleared.
            positive_reactions: Current number of kind 1-3 reactions on the comment.

        Returns:
            The (non-positive) delta applied to the author.
        """
        delta = -(self.creation_award + positive_reactions)
        self.users.adjust_xp(comment.author_id, delta)
        logger.debug(
            "Settled comment %s: XP %+d for user %s",
            comment.comment_id,
            delta,
            comment.author_id,
        )
        return delta
