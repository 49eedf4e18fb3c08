# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from dearblueno.core.security import create_access_token
from dearblueno.db.session import Base
from dearblueno.db.session import get_db as app_get_session
from dearblueno.db.time import utcnow
from dearblueno.main import app as fastapi_app
from dearblueno.models import Post, User
from dearblueno.services import ModerationWorkflow

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite manages transactions itself, which breaks SAVEPOINT; hand
    # transaction control back to SQLAlchemy.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits escaped.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _make_user(db_session: Session, name: str, **fields) -> User:
    slug = name.lower().replace(" ", "_")
    fields.setdefault("badges", [])
    user = User(
        name=name,
        email=f"{slug}@brown.edu",
        profile_picture=f"https://example.com/{slug}.png",
        **fields,
    )
    db_session.add(user)
    db_session.flush()
    db_session.refresh(user)
    return user


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory for extra members with custom account fields."""

    def _factory(name: str, **fields) -> User:
        return _make_user(db_session, name, **fields)

    return _factory


def auth_headers(user: User) -> dict[str, str]:
    """Return bearer authorization headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    return auth_headers


@pytest.fixture()
def author(db_session: Session) -> User:
    """A regular member who writes comments."""
    return _make_user(db_session, "Author", badges=["early-bird"])


@pytest.fixture()
def reactor(db_session: Session) -> User:
    """A second member who reacts to other people's content."""
    return _make_user(db_session, "Reactor")


@pytest.fixture()
def moderator(db_session: Session) -> User:
    """A member with moderation rights."""
    return _make_user(db_session, "Moderator", moderator=True)


@pytest.fixture()
def banned_user(db_session: Session) -> User:
    """A member whose ban has not expired yet."""
    return _make_user(db_session, "Banned", banned_until=utcnow() + timedelta(days=3))


@pytest.fixture()
def author_headers(author: User) -> dict[str, str]:
    return auth_headers(author)


@pytest.fixture()
def reactor_headers(reactor: User) -> dict[str, str]:
    return auth_headers(reactor)


@pytest.fixture()
def moderator_headers(moderator: User) -> dict[str, str]:
    return auth_headers(moderator)


@pytest.fixture()
def publish(db_session: Session, moderator: User) -> Callable[..., Post]:
    """Return a helper that submits and approves a post in one step."""

    def _publish(content: str = "Dear Blueno, test post", **approval) -> Post:
        workflow = ModerationWorkflow(db_session)
        post = workflow.submit_post(content)
        return workflow.approve_post(post.id, approved=True, moderator=moderator, **approval)

    return _publish


@pytest.fixture()
def approved_post(publish: Callable[..., Post]) -> Post:
    """A published post holding public number 1."""
    return publish("Dear Blueno, the Ratty ran out of waffles again.")
