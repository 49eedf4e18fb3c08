"""Post-related Pydantic schemas."""

import uuid
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from dearblueno.core.settings import settings
from dearblueno.schemas.comment import CommentResponse

PostContent = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=settings.post_max_length),
]
ContentWarning = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=settings.content_warning_max_length),
]


class PostCreate(BaseModel):
    """Schema for submitting a new post."""

    content: PostContent = Field(..., description="Post body")


class PostApproval(BaseModel):
    """Schema for a moderator decision on a post."""

    approved: bool
    content_warning: ContentWarning | None = Field(
        None,
        alias="contentWarning",
        description="Optional warning shown before the post; omit to keep the current one",
    )

    model_config = ConfigDict(populate_by_name=True)


class PostResponse(BaseModel):
    """Schema for post information returned to the public."""

    post_number: int | None
    content: str
    verified_brown: bool
    content_warning: str | None
    post_time: datetime
    approved_time: datetime | None
    approved: bool
    needs_review: bool
    comments: list[CommentResponse] = Field(default_factory=list)
    reactions: list[int] = Field(..., description="Reaction count per kind, kinds 1-6 in order")
    reacted: list[bool] = Field(..., description="Whether the caller holds each reaction kind")

    model_config = ConfigDict(from_attributes=True)


class ModeratorPostResponse(PostResponse):
    """Post information for moderators, including internal handles."""

    id: uuid.UUID
    approved_by_id: int | None
