# tests/v1/test_comments.py
"""Tests for comment creation, numbering and deletion."""

from fastapi import status

POSTS = "/api/v1/posts"


def _xp(db_session, user) -> int:
    db_session.refresh(user)
    return user.xp


def _comment(client, headers, content: str, parent_id: int = -1, anonymous: bool = False):
    return client.post(
        f"{POSTS}/1/comment",
        json={"content": content, "parentId": parent_id, "anonymous": anonymous},
        headers=headers,
    )


def test_create_comment_awards_xp(client, db_session, approved_post, author, author_headers) -> None:
    """An authored comment is published at once and earns two XP."""
    response = _comment(client, author_headers, "  hi  ")
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["comment_number"] == 1
    assert body["parent_comment_number"] == -1
    assert body["post_number"] == 1
    assert body["content"] == "hi"
    assert body["approved"] is True
    assert body["needs_review"] is False
    assert body["author"]["name"] == "Author"
    assert "email" not in body["author"]
    assert _xp(db_session, author) == 2


def test_comment_numbers_are_sequential(client, approved_post, author_headers, reactor_headers) -> None:
    """Numbers count every comment on the post, including pending ones."""
    numbers = [
        _comment(client, author_headers, "one").json()["comment_number"],
        _comment(client, reactor_headers, "two", anonymous=True).json()["comment_number"],
        _comment(client, author_headers, "three", parent_id=1).json()["comment_number"],
    ]
    assert numbers == [1, 2, 3]


def test_comment_numbers_are_per_post(client, publish, author_headers) -> None:
    """Each post numbers its own comments from 1."""
    publish("first")
    publish("second")
    client.post(
        f"{POSTS}/1/comment",
        json={"content": "a", "parentId": -1},
        headers=author_headers,
    )
    response = client.post(
        f"{POSTS}/2/comment",
        json={"content": "b", "parentId": -1},
        headers=author_headers,
    )
    assert response.json()["comment_number"] == 1
    assert response.json()["post_number"] == 2


def test_anonymous_comment_pending_without_xp(
    client, db_session, approved_post, author, author_headers
) -> None:
    """Anonymous comments carry no author, wait for review and earn nothing."""
    response = _comment(client, author_headers, "secret", anonymous=True)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["author"] is None
    assert body["approved"] is False
    assert body["needs_review"] is True
    assert _xp(db_session, author) == 0


def test_reply_to_comment(client, approved_post, author_headers, reactor_headers) -> None:
    """Replies record the parent's number."""
    _comment(client, author_headers, "parent")
    response = _comment(client, reactor_headers, "reply", parent_id=1)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["parent_comment_number"] == 1


def test_reply_to_missing_or_pending_parent(client, approved_post, author_headers) -> None:
    """Parents must exist and be approved."""
    assert _comment(client, author_headers, "orphan", parent_id=5).status_code == 404

    _comment(client, author_headers, "pending parent", anonymous=True)
    response = _comment(client, author_headers, "reply", parent_id=1)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Parent comment not found"


def test_comment_on_missing_or_pending_post(client, author_headers) -> None:
    """Comments need an approved post."""
    client.post(POSTS, json={"content": "unreviewed"})
    response = _comment(client, author_headers, "too early")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_comment_requires_authentication(client, approved_post) -> None:
    """Anonymous callers cannot comment, even anonymously."""
    response = client.post(
        f"{POSTS}/1/comment",
        json={"content": "hi", "parentId": -1, "anonymous": True},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_comment_validation(client, approved_post, author_headers) -> None:
    """Content length and parent id range are validated."""
    assert _comment(client, author_headers, "").status_code == 400
    assert _comment(client, author_headers, "x" * 2001).status_code == 400
    assert _comment(client, author_headers, "ok", parent_id=-2).status_code == 400


def test_banned_user_cannot_comment(client, approved_post, banned_user, headers_for) -> None:
    """A banned user gets 403 with the ban expiry."""
    response = _comment(client, headers_for(banned_user), "let me in")
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert "banned_until" in response.json()
    assert response.json()["detail"].startswith("User is banned until")


def test_expired_ban_allows_comment(client, approved_post, make_user, headers_for) -> None:
    """Once the ban has passed the user may comment again."""
    from datetime import timedelta

    from dearblueno.db.time import utcnow

    user = make_user("Reformed", banned_until=utcnow() - timedelta(days=1))
    assert _comment(client, headers_for(user), "back").status_code == status.HTTP_200_OK


def test_delete_comment_with_replies(
    client, db_session, approved_post, author, author_headers, reactor_headers
) -> None:
    """A deleted parent keeps its place, loses content and author, and settles XP."""
    _comment(client, author_headers, "parent")
    _comment(client, reactor_headers, "reply", parent_id=1)
    assert _xp(db_session, author) == 2

    response = client.delete(f"{POSTS}/1/comment/1", headers=author_headers)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["content"] == "[deleted]"
    assert body["author"] is None
    assert body["approved"] is True
    assert _xp(db_session, author) == 0

    comments = client.get(f"{POSTS}/1").json()["comments"]
    assert [(c["comment_number"], c["content"]) for c in comments] == [
        (1, "[deleted]"),
        (2, "reply"),
    ]
    assert comments[1]["parent_comment_number"] == 1
    assert comments[1]["author"]["name"] == "Reactor"


def test_delete_childless_comment(client, db_session, approved_post, author, author_headers) -> None:
    """A leaf comment is hidden with its content kept."""
    _comment(client, author_headers, "regret")

    response = client.delete(f"{POSTS}/1/comment/1", headers=author_headers)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["content"] == "regret"
    assert body["approved"] is False
    assert body["needs_review"] is False
    assert _xp(db_session, author) == 0
    assert client.get(f"{POSTS}/1").json()["comments"] == []

    again = client.delete(f"{POSTS}/1/comment/1", headers=author_headers)
    assert again.status_code == status.HTTP_404_NOT_FOUND


def test_delete_settles_reaction_xp(
    client, db_session, approved_post, author, author_headers, reactor_headers
) -> None:
    """Positive reactions earned by a comment are reversed on deletion."""
    _comment(client, author_headers, "popular")
    for kind in (1, 2, 3, 4):
        client.put(
            f"{POSTS}/1/comment/1/react",
            json={"reaction": kind, "state": True},
            headers=reactor_headers,
        )
    assert _xp(db_session, author) == 5

    client.delete(f"{POSTS}/1/comment/1", headers=author_headers)
    assert _xp(db_session, author) == 0


def test_delete_requires_author(client, approved_post, author_headers, reactor_headers) -> None:
    """Only the author may delete; anonymous comments cannot be deleted at all."""
    _comment(client, author_headers, "mine")
    response = client.delete(f"{POSTS}/1/comment/1", headers=reactor_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN

    assert client.delete(f"{POSTS}/1/comment/1").status_code == status.HTTP_401_UNAUTHORIZED


def test_delete_errors(client, approved_post, author_headers) -> None:
    """Missing comments are 404 and malformed numbers are 400."""
    assert client.delete(f"{POSTS}/1/comment/3", headers=author_headers).status_code == 404
    assert client.delete(f"{POSTS}/1/comment/abc", headers=author_headers).status_code == 400


def test_deleted_comment_cannot_be_reapproved(
    client, db_session, approved_post, author, author_headers, moderator_headers
) -> None:
    """A moderator cannot bring back a deleted comment, so XP is settled only once."""
    _comment(client, author_headers, "short lived")
    client.delete(f"{POSTS}/1/comment/1", headers=author_headers)
    assert _xp(db_session, author) == 0

    reapprove = client.put(
        f"{POSTS}/1/comment/1/approve",
        json={"approved": True},
        headers=moderator_headers,
    )
    assert reapprove.status_code == status.HTTP_404_NOT_FOUND

    second_delete = client.delete(f"{POSTS}/1/comment/1", headers=author_headers)
    assert second_delete.status_code == status.HTTP_404_NOT_FOUND
    assert _xp(db_session, author) == 0


def test_placeholder_comment_cannot_be_deleted_again(
    client, db_session, approved_post, author, author_headers, reactor_headers
) -> None:
    _comment(client, author_headers, "parent")
    _comment(client, reactor_headers, "reply", parent_id=1)
    client.delete(f"{POSTS}/1/comment/1", headers=author_headers)

    again = client.delete(f"{POSTS}/1/comment/1", headers=author_headers)
    assert again.status_code == status.HTTP_404_NOT_FOUND
    assert _xp(db_session, author) == 0


def test_reply_with_camel_case_parent(client, approved_post, author_headers) -> None:
    """The parent is read from ``parentId``."""
    _comment(client, author_headers, "parent")
    response = client.post(
        f"{POSTS}/1/comment",
        json={"content": "reply", "parentId": 1},
        headers=author_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["parent_comment_number"] == 1


def test_reply_with_snake_case_parent(client, approved_post, author_headers) -> None:
    """The field name is accepted as well as its alias."""
    _comment(client, author_headers, "parent")
    response = client.post(
        f"{POSTS}/1/comment",
        json={"content": "reply", "parent_id": 1},
        headers=author_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["parent_comment_number"] == 1


def test_parent_id_is_required(client, approved_post, author_headers) -> None:
    """Omitting ``parentId`` is a validation error rather than a silent top-level comment."""
    response = client.post(f"{POSTS}/1/comment", json={"content": "where?"}, headers=author_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"][0]["loc"][-1] == "parentId"
