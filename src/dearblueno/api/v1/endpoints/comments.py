"""Comment-related endpoints for the Dear Blueno API."""

from typing import Annotated

from fastapi import APIRouter, Path

from dearblueno.api.v1.dependencies import CurrentUserDep, ModeratorDep, SessionDep
from dearblueno.schemas import CommentApproval, CommentCreate, CommentResponse, ReactionUpdate
from dearblueno.services import CommentTree, ModerationWorkflow, Presenter, ReactionLedger

router = APIRouter(prefix="/posts", tags=["comments"])

PostNumberPath = Annotated[int, Path(ge=1, description="Public post number")]
CommentNumberPath = Annotated[int, Path(ge=1, description="Comment number within the post")]


@router.post("/{post_number}/comment", response_model=CommentResponse)
async def create_comment(
    post_number: PostNumberPath,
    comment_data: CommentCreate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CommentResponse:
    """Comment on an approved post, optionally anonymously."""
    comment = CommentTree(db).create(
        post_number,
        content=comment_data.content,
        parent_number=comment_data.parent_id,
        anonymous=comment_data.anonymous,
        author=current_user,
    )
    return Presenter(db, viewer_id=current_user.id).comment_out(comment)


@router.put("/{post_number}/comment/{comment_number}/approve", response_model=CommentResponse)
async def approve_comment(
    post_number: PostNumberPath,
    comment_number: CommentNumberPath,
    decision: CommentApproval,
    db: SessionDep,
    moderator: ModeratorDep,
) -> CommentResponse:
    """Approve or reject a comment (moderators only)."""
    comment = ModerationWorkflow(db).approve_comment(
        post_number,
        comment_number,
        approved=decision.approved,
        moderator=moderator,
    )
    return Presenter(db, viewer_id=moderator.id).comment_out(comment)


@router.put("/{post_number}/comment/{comment_number}/react", response_model=CommentResponse)
async def react_to_comment(
    post_number: PostNumberPath,
    comment_number: CommentNumberPath,
    reaction: ReactionUpdate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CommentResponse:
    """Add or remove the caller's reaction on a comment."""
    comment = ReactionLedger(db).set_comment_reaction(
        post_number,
        comment_number,
        reaction.reaction,
        current_user.id,
        reaction.state,
    )
    return Presenter(db, viewer_id=current_user.id).comment_out(comment)


@router.delete("/{post_number}/comment/{comment_number}", response_model=CommentResponse)
async def delete_comment(
    post_number: PostNumberPath,
    comment_number: CommentNumberPath,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CommentResponse:
    """Delete one of the caller's own comments."""
    comment = CommentTree(db).delete(post_number, comment_number, requester=current_user)
    return Presenter(db, viewer_id=current_user.id).comment_out(comment)
