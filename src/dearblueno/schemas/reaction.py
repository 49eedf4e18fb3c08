"""Reaction-related Pydantic schemas."""

from pydantic import BaseModel, Field


class ReactionUpdate(BaseModel):
    """Schema for toggling one reaction kind."""

    reaction: int = Field(..., ge=1, le=6, description="Reaction kind, 1-6")
    state: bool = Field(..., description="True to add the reaction, False to remove it")


class ReactorName(BaseModel):
    """A reacting user, reduced to their display name."""

    name: str
