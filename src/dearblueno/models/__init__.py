# src/dearblueno/models/__init__.py
"""SQLAlchemy models for the Dear Blueno application."""

from .comment import Comment
from .moderation import ModerationState
from .post import Post
from .reaction import POSITIVE_KINDS, REACTION_KINDS, CommentReaction, PostReaction, ReactionKind
from .sequence import SequenceCounter
from .user import User

__all__ = [
    "Comment",
    "ModerationState",
    "Post",
    "POSITIVE_KINDS", "REACTION_KINDS", "CommentReaction", "PostReaction", "ReactionKind",
    "SequenceCounter",
    "User",
]
