# tests/test_services.py
"""Service-level tests that exercise the content core without HTTP."""

import pytest

from dearblueno.core.errors import AuthorMismatchError, NotFoundError
from dearblueno.models import Comment, ModerationState, ReactionKind
from dearblueno.repositories import ReactionRepository, UserRepository
from dearblueno.repositories.post_repo import tokenize
from dearblueno.services import CommentTree, ModerationWorkflow, ReactionLedger
from dearblueno.services.sequence import claim_next, claim_next_post_number
from dearblueno.services.xp import AnonymousComment, AuthoredComment, XPEconomy, authorship_of


def test_claim_next_starts_at_one(db_session) -> None:
    """A fresh sequence hands out 1, 2, 3 without gaps."""
    assert [claim_next(db_session, "scratch") for _ in range(3)] == [1, 2, 3]
    assert claim_next(db_session, "other") == 1


def test_post_number_sequence_is_shared(db_session) -> None:
    assert claim_next_post_number(db_session) == 1
    assert claim_next_post_number(db_session) == 2


def test_moderation_state_flags() -> None:
    """The flag pair maps onto exactly one state and back."""
    for state in ModerationState:
        needs_review, approved = state.flags()
        assert ModerationState.from_flags(needs_review=needs_review, approved=approved) is state
    assert ModerationState.from_flags(needs_review=True, approved=True) is ModerationState.APPROVED


def test_authorship_variants() -> None:
    """Only comments with an author become ``AuthoredComment``."""
    assert authorship_of(Comment(id=1, author_id=7)) == AuthoredComment(comment_id=1, author_id=7)
    assert authorship_of(Comment(id=2, author_id=None)) == AnonymousComment(comment_id=2)


def test_xp_conservation(db_session, approved_post, author) -> None:
    """Creation plus N adds minus M removes settles back to zero."""
    created = CommentTree(db_session).create(
        1, content="hi", parent_number=-1, anonymous=False, author=author
    )
    economy = XPEconomy(UserRepository(db_session), creation_award=2)
    comment = authorship_of(created)
    assert isinstance(comment, AuthoredComment)
    for kind in (ReactionKind.LIKE, ReactionKind.HEART, ReactionKind.LAUGH, ReactionKind.LIKE):
        economy.apply_reaction(comment, kind, added=True)
    economy.apply_reaction(comment, ReactionKind.LIKE, added=False)
    assert economy.apply_reaction(comment, 5, added=True) == 0

    db_session.refresh(author)
    assert author.xp == 2 + 4 - 1

    assert economy.settle_deletion(comment, positive_reactions=3) == -5
    db_session.refresh(author)
    assert author.xp == 0


def test_reaction_repository_set_semantics(db_session, approved_post, reactor) -> None:
    """Membership rows are inserted and removed at most once."""
    repo = ReactionRepository.for_posts(db_session)
    assert repo.add(approved_post.id, 3, reactor.id) is True
    assert repo.add(approved_post.id, 3, reactor.id) is False
    assert repo.ledger(approved_post.id)[2] == [reactor.id]
    assert repo.count_kinds(approved_post.id, {1, 2, 3}) == 1
    assert repo.remove(approved_post.id, 3, reactor.id) is True
    assert repo.remove(approved_post.id, 3, reactor.id) is False
    assert repo.ledger(approved_post.id) == [[], [], [], [], [], []]


def test_reaction_ledger_reports_comment(db_session, approved_post, author, reactor) -> None:
    tree = CommentTree(db_session)
    tree.create(1, content="hi", parent_number=-1, anonymous=False, author=author)

    ledger = ReactionLedger(db_session)
    comment = ledger.set_comment_reaction(1, 1, 2, reactor.id, True)
    assert comment.comment_number == 1
    assert ledger.comment_ledger(1, 1)[1] == [reactor.id]


def test_approve_unknown_post_raises(db_session, moderator) -> None:
    import uuid

    with pytest.raises(NotFoundError):
        ModerationWorkflow(db_session).approve_post(uuid.uuid4(), approved=True, moderator=moderator)


def test_anonymous_comment_cannot_be_deleted(
    db_session, approved_post, author, moderator
) -> None:
    """Once approved, an anonymous comment has no author to match."""
    tree = CommentTree(db_session)
    tree.create(1, content="anon", parent_number=-1, anonymous=True, author=author)
    ModerationWorkflow(db_session).approve_comment(1, 1, approved=True, moderator=moderator)

    with pytest.raises(AuthorMismatchError):
        tree.delete(1, 1, requester=author)


def test_deleted_comment_reactions_do_not_reach_author(
    db_session, approved_post, author, reactor
) -> None:
    """After a deletion with replies, the placeholder's reactions earn nothing."""
    tree = CommentTree(db_session)
    tree.create(1, content="parent", parent_number=-1, anonymous=False, author=author)
    tree.create(1, content="reply", parent_number=1, anonymous=False, author=reactor)
    tree.delete(1, 1, requester=author)

    ReactionLedger(db_session).set_comment_reaction(1, 1, 1, reactor.id, True)
    db_session.refresh(author)
    assert author.xp == 0


def test_tokenize() -> None:
    assert tokenize("Test, TEST! don't") == ["test", "test", "don't"]
    assert tokenize("   ") == []


def test_reaction_xp_stops_after_deletion(db_session, approved_post, author) -> None:
    """A reaction recorded after deletion cannot reach the former author."""
    tree = CommentTree(db_session)
    created = tree.create(1, content="gone", parent_number=-1, anonymous=False, author=author)
    comment = authorship_of(created)
    tree.delete(1, 1, requester=author)

    economy = XPEconomy(UserRepository(db_session))
    assert economy.apply_reaction(comment, ReactionKind.LIKE, added=True) == 0
    db_session.refresh(author)
    assert author.xp == 0


def test_deleted_comment_cannot_be_moderated(db_session, approved_post, author, moderator) -> None:
    tree = CommentTree(db_session)
    tree.create(1, content="gone", parent_number=-1, anonymous=False, author=author)
    tree.delete(1, 1, requester=author)

    with pytest.raises(NotFoundError):
        ModerationWorkflow(db_session).approve_comment(1, 1, approved=True, moderator=moderator)
    with pytest.raises(NotFoundError):
        tree.delete(1, 1, requester=author)
    db_session.refresh(author)
    assert author.xp == 0


def test_assign_number_only_once(db_session, moderator) -> None:
    """A post that already holds a number is never renumbered."""
    from dearblueno.repositories import PostRepository

    workflow = ModerationWorkflow(db_session)
    post = workflow.submit_post("numbered once")
    workflow.approve_post(post.id, approved=True, moderator=moderator)

    repo = PostRepository(db_session)
    assert repo.assign_number(post.id, 99) is False
    db_session.refresh(post)
    assert post.post_number == 1
