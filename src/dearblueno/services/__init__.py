# src/dearblueno/services/__init__.py
"""Business logic services for the Dear Blueno application."""

from .comment_tree import CommentTree
from .moderation import ModerationWorkflow
from .presenter import Presenter
from .reactions import ReactionLedger
from .xp import AnonymousComment, AuthoredComment, XPEconomy, authorship_of

__all__ = [
    "AnonymousComment",
    "AuthoredComment",
    "CommentTree",
    "ModerationWorkflow",
    "Presenter",
    "ReactionLedger",
    "XPEconomy",
    "authorship_of",
]
