"""Assemble API responses through explicit repository calls.

Related records are fetched in batches and projected onto the public field
set: authors are reduced to name, picture and badges, and moderator-only
fields are added only when asked for.

Reactions are reported as per-kind counts plus the viewer's own flags;
reactor identities only leave through the name-only reaction listings.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from dearblueno.models import Comment, Post
from dearblueno.repositories import (
    CommentRepository,
    PostRepository,
    ReactionRepository,
    UserRepository,
)
from dearblueno.schemas import (
    CommentResponse,
    ModeratorPostResponse,
    PendingCommentResponse,
    PostResponse,
    PostSummary,
    PublicAuthor,
    ReactorName,
)


class Presenter:
    """Build response schemas for posts, comments and reaction ledgers."""

    def __init__(self, db: Session, viewer_id: int | None = None) -> None:
        self.viewer_id = viewer_id
        self.posts = PostRepository(db)
        self.comments = CommentRepository(db)
        self.users = UserRepository(db)
        self.post_reactions = ReactionRepository.for_posts(db)
        self.comment_reactions = ReactionRepository.for_comments(db)

    def _reaction_fields(self, ledger: list[list[int]]) -> dict[str, list]:
        return {
            "reactions": [len(slot) for slot in ledger],
            "reacted": [self.viewer_id is not None and self.viewer_id in slot for slot in ledger],
        }

    def comments_out(self, comments: Sequence[Comment]) -> list[CommentResponse]:
        authors = self.users.display_fields(c.author_id for c in comments)
        ledgers = self.comment_reactions.ledgers(c.id for c in comments)
        return [
            CommentResponse(
                comment_number=comment.comment_number,
                parent_comment_number=comment.parent_comment_number,
                post_number=comment.post_number,
                content=comment.content,
                author=(
                    PublicAuthor(**authors[comment.author_id])
                    if comment.author_id in authors
                    else None
                ),
                comment_time=comment.comment_time,
                approved=comment.approved,
                needs_review=comment.needs_review,
                **self._reaction_fields(ledgers[comment.id]),
            )
            for comment in comments
        ]

    def comment_out(self, comment: Comment) -> CommentResponse:
        return self.comments_out([comment])[0]

    def posts_out(
        self,
        posts: Sequence[Post],
        *,
        moderator: bool = False,
        include_comments: bool = True,
    ) -> list[PostResponse]:
        """Render posts with their comment sections.

        Public views only embed approved comments; moderator views embed all
        of them and expose the internal id and approving moderator.
        """
        post_ids = [post.id for post in posts]
        ledgers = self.post_reactions.ledgers(post_ids)
        grouped = (
            self.comments.list_for_posts(post_ids, approved_only=not moderator)
            if include_comments
            else {}
        )

        schema = ModeratorPostResponse if moderator else PostResponse
        rendered: list[PostResponse] = []
        for post in posts:
            fields = {
                "post_number": post.post_number,
                "content": post.content,
                "verified_brown": post.verified_brown,
                "content_warning": post.content_warning,
                "post_time": post.post_time,
                "approved_time": post.approved_time,
                "approved": post.approved,
                "needs_review": post.needs_review,
                "comments": self.comments_out(grouped.get(post.id, [])),
                **self._reaction_fields(ledgers[post.id]),
            }
            if moderator:
                fields.update(id=post.id, approved_by_id=post.approved_by_id)
            rendered.append(schema(**fields))
        return rendered

    def post_out(self, post: Post, *, moderator: bool = False) -> PostResponse:
        return self.posts_out([post], moderator=moderator)[0]

    def pending_comments_out(self, comments: Sequence[Comment]) -> list[PendingCommentResponse]:
        """Render queue entries with their post and parent comment."""
        parent_ids = {c.parent_comment_id for c in comments if c.parent_comment_id is not None}
        parents = [
            parent
            for parent in (self.comments.get_by_id(pid) for pid in sorted(parent_ids))
            if parent is not None
        ]
        rendered_parents = {
            parent.id: out for parent, out in zip(parents, self.comments_out(parents))
        }
        base = self.comments_out(comments)

        entries: list[PendingCommentResponse] = []
        for comment, out in zip(comments, base):
            post = self.posts.get_by_id(comment.post_id)
            entries.append(
                PendingCommentResponse(
                    **out.model_dump(),
                    post=(
                        PostSummary(post_number=comment.post_number, content=post.content)
                        if post is not None
                        else None
                    ),
                    parent_comment=rendered_parents.get(comment.parent_comment_id),
                )
            )
        return entries

    def reactor_names(self, ledger: list[list[int]]) -> list[list[ReactorName]]:
        """Replace reactor ids with display names only."""
        names = self.users.display_fields(user_id for slot in ledger for user_id in slot)
        return [
            [ReactorName(name=names[user_id]["name"]) for user_id in slot if user_id in names]
            for slot in ledger
        ]
