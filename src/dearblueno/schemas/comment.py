"""Comment-related Pydantic schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from dearblueno.core.settings import settings
from dearblueno.schemas.user import PublicAuthor

CommentContent = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=settings.comment_max_length),
]


class CommentCreate(BaseModel):
    """Schema for creating a new comment."""

    content: CommentContent
    parent_id: int = Field(
        ...,
        alias="parentId",
        ge=-1,
        description="Parent comment number, -1 for top level",
    )
    anonymous: bool = False

    model_config = ConfigDict(populate_by_name=True)


class CommentApproval(BaseModel):
    """Schema for a moderator decision on a comment."""

    approved: bool


class CommentResponse(BaseModel):
    """Schema for comment information returned by the API."""

    comment_number: int
    parent_comment_number: int
    post_number: int
    content: str
    author: PublicAuthor | None
    comment_time: datetime
    approved: bool
    needs_review: bool
    reactions: list[int] = Field(..., description="Reaction count per kind, kinds 1-6 in order")
    reacted: list[bool] = Field(..., description="Whether the caller holds each reaction kind")

    model_config = ConfigDict(from_attributes=True)


class PostSummary(BaseModel):
    """Owning post context shown in the comment moderation queue."""

    post_number: int
    content: str


class PendingCommentResponse(CommentResponse):
    """Queue entry for a comment awaiting review."""

    post: PostSummary | None
    parent_comment: CommentResponse | None
