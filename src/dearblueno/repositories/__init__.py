"""Data access layer over the content store."""

from .comment_repo import CommentRepository
from .post_repo import PostRepository
from .reaction_repo import ReactionRepository
from .user_repo import UserRepository

__all__ = ["CommentRepository", "PostRepository", "ReactionRepository", "UserRepository"]
