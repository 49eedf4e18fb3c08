"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .posts import router as posts_router

__all__ = ["comments_router", "posts_router"]
