# src/dearblueno/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import (
    CommentApproval,
    CommentCreate,
    CommentResponse,
    PendingCommentResponse,
    PostSummary,
)
from .post import ModeratorPostResponse, PostApproval, PostCreate, PostResponse
from .reaction import ReactionUpdate, ReactorName
from .user import PublicAuthor

__all__ = [
    "CommentApproval", "CommentCreate", "CommentResponse", "PendingCommentResponse", "PostSummary",
    "ModeratorPostResponse", "PostApproval", "PostCreate", "PostResponse",
    "ReactionUpdate", "ReactorName",
    "PublicAuthor",
]
