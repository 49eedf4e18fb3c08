"""Comment numbering, parent resolution and deletion semantics."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from dearblueno.core.errors import AuthorMismatchError, ForbiddenError, NotFoundError
from dearblueno.core.settings import settings
from dearblueno.db.time import as_utc, utcnow
from dearblueno.models import POSITIVE_KINDS, Comment, ModerationState, Post, User
from dearblueno.models.comment import TOP_LEVEL_PARENT
from dearblueno.repositories import (
    CommentRepository,
    PostRepository,
    ReactionRepository,
    UserRepository,
)
from dearblueno.services.xp import AuthoredComment, XPEconomy, authorship_of

logger = logging.getLogger(__name__)


def ensure_not_banned(user: User) -> None:
    """Raise ``ForbiddenError`` while a ban is in effect."""
    if user.banned_until is None:
        return
    banned_until = as_utc(user.banned_until)
    if banned_until > utcnow():
        logger.warning("Banned user %s attempted to comment", user.id)
        raise ForbiddenError(
            f"User is banned until {banned_until.date().isoformat()}",
            banned_until=banned_until,
        )


class CommentTree:
    """Maintain the numbered comment tree of each post."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.posts = PostRepository(db)
        self.comments = CommentRepository(db)
        self.reactions = ReactionRepository.for_comments(db)
        self.xp = XPEconomy(UserRepository(db))

    def resolve_parent(self, post: Post, parent_number: int) -> Comment | None:
        """Return the approved parent comment, or None for top-level comments.

        Raises:
            NotFoundError: If the parent does not exist or is not approved.
        """
        if parent_number == TOP_LEVEL_PARENT:
            return None
        parent = self.comments.get_by_number(post.id, parent_number)
        if parent is None or not parent.approved:
            raise NotFoundError("Parent comment not found")
        return parent

    def create(
        self,
        post_number: int,
        *,
        content: str,
        parent_number: int,
        anonymous: bool,
        author: User,
    ) -> Comment:
        """Attach a comment to an approved post.

        Authored comments are published immediately and earn XP; anonymous
        comments wait for moderation and carry no author.
        """
        ensure_not_banned(author)

        post = self.posts.get_approved_by_number(post_number, for_update=True)
        if post is None:
            raise NotFoundError("Post not found")
        parent = self.resolve_parent(post, parent_number)

        state = ModerationState.PENDING if anonymous else ModerationState.APPROVED
        needs_review, approved = state.flags()
        comment = Comment(
            comment_number=self.posts.claim_comment_number(post.id),
            parent_comment_number=parent_number,
            parent_comment_id=parent.id if parent is not None else None,
            post_id=post.id,
            post_number=post_number,
            content=content,
            author_id=None if anonymous else author.id,
            needs_review=needs_review,
            approved=approved,
            comment_time=utcnow(),
        )
        self.comments.add(comment)

        authorship = authorship_of(comment)
        if isinstance(authorship, AuthoredComment):
            self.xp.award_creation(authorship)

        self.db.commit()
        logger.info(
            "Comment %d created on post %d (parent %d, %s)",
            comment.comment_number,
            post_number,
            parent_number,
            state.value,
        )
        return comment

    def delete(self, post_number: int, comment_number: int, *, requester: User) -> Comment:
        """Delete a comment on behalf of its author.

        A comment with replies keeps its place in the tree but loses its
        content and author; a leaf comment is hidden with its content kept for
        audit. Either way the XP it earned is settled.

        Raises:
            NotFoundError: If the comment does not exist, is not visible or was
                already deleted.
            AuthorMismatchError: If the requester did not write the comment.
        """
        comment = self.comments.get_by_post_number(post_number, comment_number, for_update=True)
        if comment is None or not comment.approved or comment.is_deleted:
            raise NotFoundError("Comment not found")

        authorship = authorship_of(comment)
        if not isinstance(authorship, AuthoredComment) or authorship.author_id != requester.id:
            logger.warning(
                "User %s tried to delete comment %d on post %d they did not write",
                requester.id,
                comment_number,
                post_number,
            )
            raise AuthorMismatchError("You are not the author of this comment")

        if self.comments.has_children(comment.id):
            changes = {
                "content": settings.deleted_placeholder,
                "author_id": None,
                "needs_review": False,
            }
        else:
            needs_review, approved = ModerationState.REJECTED.flags()
            changes = {"needs_review": needs_review, "approved": approved}

        if not self.comments.mark_deleted(comment.id, authorship.author_id, utcnow(), changes):
            # A concurrent deletion settled this comment first.
            self.db.rollback()
            raise NotFoundError("Comment not found")
        self.db.refresh(comment)

        # The comment is now deleted, so no later reaction can move its
        # former author's XP.
        positive = self.reactions.count_kinds(comment.id, POSITIVE_KINDS)
        self.xp.settle_deletion(authorship, positive)

        self.db.commit()
        logger.info("Comment %d on post %d deleted by its author", comment_number, post_number)
        return comment
