"""Post-related endpoints for the Dear Blueno API."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Path, Query

from dearblueno.api.v1.dependencies import (
    CurrentUserDep,
    ModeratorDep,
    OptionalUserDep,
    SessionDep,
)
from dearblueno.core.errors import NotFoundError, ValidationFailed
from dearblueno.core.settings import settings
from dearblueno.models import User
from dearblueno.repositories import PostRepository
from dearblueno.schemas import (
    ModeratorPostResponse,
    PendingCommentResponse,
    PostApproval,
    PostCreate,
    PostResponse,
    ReactionUpdate,
    ReactorName,
)
from dearblueno.services import ModerationWorkflow, Presenter, ReactionLedger

router = APIRouter(prefix="/posts", tags=["posts"])

PageQuery = Annotated[int, Query(ge=1, description="1-based page number")]
PostNumberPath = Annotated[int, Path(ge=1, description="Public post number")]
CommentNumberPath = Annotated[int, Path(ge=1, description="Comment number within the post")]


def _viewer_id(user: User | None) -> int | None:
    return user.id if user is not None else None


@router.get("", response_model=list[PostResponse])
async def list_posts(
    db: SessionDep,
    viewer: OptionalUserDep,
    page: PageQuery = 1,
) -> list[PostResponse]:
    """List approved posts, newest public number first."""
    posts = PostRepository(db).list_approved(page=page, page_size=settings.page_size)
    return Presenter(db, viewer_id=_viewer_id(viewer)).posts_out(posts)


@router.get("/all", response_model=list[ModeratorPostResponse])
async def list_all_posts(
    db: SessionDep,
    moderator: ModeratorDep,
    page: PageQuery = 1,
) -> list[PostResponse]:
    """List every post in any moderation state, most recently submitted first."""
    posts = PostRepository(db).list_all(page=page, page_size=settings.page_size)
    return Presenter(db, viewer_id=moderator.id).posts_out(posts, moderator=True)


@router.get("/mod-feed", response_model=list[ModeratorPostResponse])
async def post_moderation_queue(
    db: SessionDep,
    moderator: ModeratorDep,
    page: PageQuery = 1,
) -> list[PostResponse]:
    """List posts awaiting review, oldest first."""
    posts = ModerationWorkflow(db).pending_posts(page, settings.page_size)
    presenter = Presenter(db, viewer_id=moderator.id)
    return presenter.posts_out(posts, moderator=True, include_comments=False)


@router.get("/mod-feed/comments", response_model=list[PendingCommentResponse])
async def comment_moderation_queue(
    db: SessionDep,
    moderator: ModeratorDep,
    page: PageQuery = 1,
) -> list[PendingCommentResponse]:
    """List comments awaiting review, oldest first."""
    comments = ModerationWorkflow(db).pending_comments(page, settings.page_size)
    return Presenter(db, viewer_id=moderator.id).pending_comments_out(comments)


@router.get("/search", response_model=list[PostResponse])
async def search_posts(
    db: SessionDep,
    viewer: OptionalUserDep,
    query: Annotated[str, Query(min_length=settings.search_min_length)],
) -> list[PostResponse]:
    """Search approved posts, most relevant first."""
    if not query.isascii():
        raise ValidationFailed.single("query", "Search query must be ASCII")
    posts = PostRepository(db).search(query, limit=settings.search_limit)
    return Presenter(db, viewer_id=_viewer_id(viewer)).posts_out(posts)


@router.get("/{post_number}/reactions", response_model=list[list[ReactorName]])
async def get_post_reactions(
    post_number: PostNumberPath,
    db: SessionDep,
) -> list[list[ReactorName]]:
    """Return the names of everyone who reacted to a post, per kind."""
    ledger = ReactionLedger(db).post_ledger(post_number)
    return Presenter(db).reactor_names(ledger)


@router.get(
    "/{post_number}/comments/{comment_number}/reactions",
    response_model=list[list[ReactorName]],
)
async def get_comment_reactions(
    post_number: PostNumberPath,
    comment_number: CommentNumberPath,
    db: SessionDep,
) -> list[list[ReactorName]]:
    """Return the names of everyone who reacted to a comment, per kind."""
    ledger = ReactionLedger(db).comment_ledger(post_number, comment_number)
    return Presenter(db).reactor_names(ledger)


@router.get("/{post_number}", response_model=PostResponse)
async def get_post(
    post_number: PostNumberPath,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> PostResponse:
    """Get a single approved post with its approved comments."""
    post = PostRepository(db).get_approved_by_number(post_number)
    if post is None:
        raise NotFoundError("Post not found")
    return Presenter(db, viewer_id=_viewer_id(viewer)).post_out(post)


@router.post("", response_model=PostResponse)
async def create_post(
    post_data: PostCreate,
    db: SessionDep,
    current_user: OptionalUserDep,
) -> PostResponse:
    """Submit a post for moderation. Authentication is optional."""
    post = ModerationWorkflow(db).submit_post(post_data.content, current_user)
    return Presenter(db, viewer_id=_viewer_id(current_user)).post_out(post)


@router.put("/{post_id}/approve", response_model=ModeratorPostResponse)
async def approve_post(
    post_id: uuid.UUID,
    decision: PostApproval,
    db: SessionDep,
    moderator: ModeratorDep,
) -> PostResponse:
    """Approve or reject a post by internal id (moderators only)."""
    post = ModerationWorkflow(db).approve_post(
        post_id,
        approved=decision.approved,
        moderator=moderator,
        content_warning=decision.content_warning,
    )
    return Presenter(db, viewer_id=moderator.id).post_out(post, moderator=True)


@router.put("/{post_number}/react", response_model=PostResponse)
async def react_to_post(
    post_number: PostNumberPath,
    reaction: ReactionUpdate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> PostResponse:
    """Add or remove the caller's reaction on a post."""
    post = ReactionLedger(db).set_post_reaction(
        post_number,
        reaction.reaction,
        current_user.id,
        reaction.state,
    )
    return Presenter(db, viewer_id=current_user.id).post_out(post)
