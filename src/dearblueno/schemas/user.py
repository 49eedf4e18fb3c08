"""User projections that may appear next to content."""

from pydantic import BaseModel, ConfigDict, Field


class PublicAuthor(BaseModel):
    """The only author fields ever shown with posts and comments."""

    name: str
    profile_picture: str | None = None
    badges: list[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
