"""Moderation workflow for posts and comments."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from dearblueno.core.errors import NotFoundError
from dearblueno.db.time import utcnow
from dearblueno.models import Comment, ModerationState, Post, User
from dearblueno.repositories import CommentRepository, PostRepository
from dearblueno.services.sequence import claim_next_post_number

logger = logging.getLogger(__name__)


class ModerationWorkflow:
    """Service handling moderation state transitions.

    Posts and comments share the same three states (pending, approved,
    rejected). Every decision is a single transition applied by a moderator;
    approving a post for the first time also claims its public number.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.posts = PostRepository(db)
        self.comments = CommentRepository(db)

    def submit_post(self, content: str, submitter: User | None = None) -> Post:
        """Store a new submission in the pending state.

        Args:
            content: Trimmed post body.
            submitter: Optional authenticated submitter; only their verification
                flag is recorded, never their identity.

        Returns:
            The persisted, unnumbered post.
        """
        needs_review, approved = ModerationState.PENDING.flags()
        post = Post(
            content=content,
            verified_brown=bool(submitter and submitter.verified_brown),
            needs_review=needs_review,
            approved=approved,
            post_time=utcnow(),
        )
        self.posts.add(post)
        self.db.commit()
        logger.info("Post %s submitted for review", post.id)
        return post

    def approve_post(
        self,
        post_id: uuid.UUID,
        *,
        approved: bool,
        moderator: User,
        content_warning: str | None = None,
    ) -> Post:
        """Approve or reject a post.

        Args:
            post_id: Internal post identifier.
            approved: Target state; False rejects the post.
            moderator: Moderator making the decision.
            content_warning: Replacement warning. ``None`` keeps the current one and
                an empty string clears it.

        Returns:
            The updated post.

        Raises:
            NotFoundError: If no post has this identifier.
        """
        post = self.posts.get_by_id(post_id, for_update=True)
        if post is None:
            raise NotFoundError("Post not found")

        target = ModerationState.APPROVED if approved else ModerationState.REJECTED
        post.needs_review, post.approved = target.flags()
        post.approved_time = utcnow()
        post.approved_by_id = moderator.id
        if content_warning is not None:
            post.content_warning = content_warning or None

        if post.approved and post.post_number is None:
            self._number_post(post)

        self.db.commit()
        logger.info(
            "Moderator %s set post %s to %s",
            moderator.id,
            post.id,
            target.value,
        )
        return post

    def _number_post(self, post: Post) -> None:
        """Claim a public number for ``post`` unless it already has one.

        The row lock is not honoured by every backend, so the number is
        written with a ``post_number IS NULL`` guard. When a concurrent
        approval got there first the claim is rolled back with its savepoint
        and the stored number is reloaded.
        """
        savepoint = self.db.begin_nested()
        number = claim_next_post_number(self.db)
        if self.posts.assign_number(post.id, number):
            savepoint.commit()
            logger.info("Post %s assigned public number %d", post.id, number)
        else:
            savepoint.rollback()
            logger.info("Post %s was numbered by a concurrent approval", post.id)
        self.db.refresh(post)

    def approve_comment(
        self,
        post_number: int,
        comment_number: int,
        *,
        approved: bool,
        moderator: User,
    ) -> Comment:
        """Approve or reject a comment. Comment numbers are unaffected."""
        post = self.posts.get_by_number(post_number)
        if post is None:
            raise NotFoundError("Post not found")

        comment = self.comments.get_by_number(post.id, comment_number, for_update=True)
        # Deleted comments have had their XP settled and stay as their author left them.
        if comment is None or comment.is_deleted:
            raise NotFoundError("Comment not found")

        target = ModerationState.APPROVED if approved else ModerationState.REJECTED
        comment.needs_review, comment.approved = target.flags()
        self.db.commit()
        logger.info(
            "Moderator %s set comment %d on post %d to %s",
            moderator.id,
            comment_number,
            post_number,
            target.value,
        )
        return comment

    def pending_posts(self, page: int, page_size: int) -> list[Post]:
        """Moderation queue for posts, oldest first."""
        return self.posts.list_pending(page=page, page_size=page_size)

    def pending_comments(self, page: int, page_size: int) -> list[Comment]:
        """Moderation queue for comments, oldest first."""
        return self.comments.list_pending(page=page, page_size=page_size)
