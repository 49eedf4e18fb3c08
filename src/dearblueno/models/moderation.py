# src/dearblueno/models/moderation.py
"""Moderation states shared by posts and comments."""

from enum import Enum


class ModerationState(str, Enum):
    """Visibility state derived from the ``needs_review``/``approved`` flag pair."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def from_flags(cls, *, needs_review: bool, approved: bool) -> "ModerationState":
        """Map the stored flag pair onto a state.

        ``approved`` wins over ``needs_review`` so that legacy rows with both
        flags set are still treated as visible.
        """
        if approved:
            return cls.APPROVED
        if needs_review:
            return cls.PENDING
        return cls.REJECTED

    def flags(self) -> tuple[bool, bool]:
        """Return the ``(needs_review, approved)`` pair for this state."""
        return self is ModerationState.PENDING, self is ModerationState.APPROVED
