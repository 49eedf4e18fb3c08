"""Data access helpers for working with posts."""
from __future__ import annotations

import re
import uuid
from collections import Counter

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from dearblueno.models.post import Post

__all__ = ["PostRepository"]

_TOKEN_RE = re.compile(r"[a-z0-9']+")


def tokenize(text: str) -> list[str]:
    """Split text into lowercase search terms."""
    return _TOKEN_RE.findall(text.lower())


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: uuid.UUID, *, for_update: bool = False) -> Post | None:
        """Return a post by internal identifier."""
        stmt = select(Post).where(Post.id == post_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalars().first()

    def get_by_number(self, post_number: int, *, for_update: bool = False) -> Post | None:
        """Return a post by its public number, whatever its moderation state."""
        stmt = select(Post).where(Post.post_number == post_number)
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalars().first()

    def get_approved_by_number(self, post_number: int, *, for_update: bool = False) -> Post | None:
        """Return a publicly visible post by number, or ``None``."""
        post = self.get_by_number(post_number, for_update=for_update)
        if post is None or not post.approved:
            return None
        return post

    def add(self, post: Post) -> Post:
        """Stage a new post and flush so defaults are populated."""
        self.session.add(post)
        self.session.flush()
        return post

    def list_approved(self, *, page: int, page_size: int) -> list[Post]:
        """Return approved posts, newest public number first."""
        stmt = (
            select(Post)
            .where(Post.approved.is_(True))
            .order_by(Post.post_number.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(self.session.execute(stmt).scalars())

    def list_all(self, *, page: int, page_size: int) -> list[Post]:
        """Return every post regardless of state, most recently submitted first."""
        stmt = (
            select(Post)
            .order_by(Post.post_time.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(self.session.execute(stmt).scalars())

    def list_pending(self, *, page: int, page_size: int) -> list[Post]:
        """Return posts awaiting review, oldest submission first."""
        stmt = (
            select(Post)
            .where(Post.needs_review.is_(True))
            .order_by(Post.post_time.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(self.session.execute(stmt).scalars())

    def search(self, query: str, *, limit: int) -> list[Post]:
        """Return approved posts matching ``query`` ordered by relevance.

        Relevance is the number of occurrences of the query terms in the post.
        Ties keep store order (submission time, then id).
        """
        terms = set(tokenize(query))
        if not terms:
            return []

        stmt = (
            select(Post)
            .where(
                Post.approved.is_(True),
                or_(*(Post.content.ilike(f"%{term}%") for term in terms)),
            )
            .order_by(Post.post_time.asc(), Post.id.asc())
        )
        scored: list[tuple[int, Post]] = []
        for post in self.session.execute(stmt).scalars():
            counts = Counter(tokenize(post.content))
            score = sum(counts[term] for term in terms)
            if score:
                scored.append((score, post))

        # sorted() is stable, so equal scores keep store order.
        scored = sorted(scored, key=lambda item: item[0], reverse=True)
        return [post for _, post in scored[:limit]]

    def claim_comment_number(self, post_id: uuid.UUID) -> int:
        """Atomically reserve the next comment number on a post.

        The increment happens in the database so concurrent writers serialize
        on the post row instead of reading a shared count.
        """
        self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(comment_seq=Post.comment_seq + 1)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(
            select(Post.comment_seq).where(Post.id == post_id)
        ).scalar_one()

    def assign_number(self, post_id: uuid.UUID, post_number: int) -> bool:
        """Set the public number only if the post has none yet.

        Returns False when another approval numbered the post first.
        """
        result = self.session.execute(
            update(Post)
            .where(Post.id == post_id, Post.post_number.is_(None))
            .values(post_number=post_number)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
