# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from typing import Any

import pytest

# Settings are read at import time, so the environment must be ready first.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from loopfeed.core.security import create_access_token, hash_password  # noqa: E402
from loopfeed.db.session import Base  # noqa: E402
from loopfeed.db.session import get_db as app_get_session  # noqa: E402
from loopfeed.main import app as fastapi_app  # noqa: E402
from loopfeed.models import Post, User  # noqa: E402
from loopfeed.services.storage import LocalMediaStorage, get_media_storage  # noqa: E402

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "secret123"

_USER_COUNTER = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


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
def media_storage(app: FastAPI, tmp_path) -> Iterator[LocalMediaStorage]:
    storage = LocalMediaStorage(tmp_path / "media", "/static/media", max_bytes=1024)
    app.dependency_overrides[get_media_storage] = lambda: storage
    try:
        yield storage
    finally:
        app.dependency_overrides.pop(get_media_storage, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Insert a user directly; the password is always ``TEST_PASSWORD``."""

    def _make_user(username: str | None = None, **overrides: Any) -> User:
        handle = username or f"user{next(_USER_COUNTER)}"
        user = User(
            username=handle,
            email=overrides.pop("email", f"{handle}@example.com"),
            full_name=overrides.pop("full_name", handle.title()),
            password_hash=hash_password(TEST_PASSWORD),
            **overrides,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Insert a video post owned by ``owner``."""

    def _make_post(owner: User, **overrides: Any) -> Post:
        fields: dict[str, Any] = {
            "kind": "video",
            "title": "A video",
            "video_url": "/static/media/videos/clip.mp4",
        }
        fields.update(overrides)
        post = Post(owner_id=owner.id, **fields)
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make_post


def auth_headers_for(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    return auth_headers_for


@pytest.fixture()
def alice(make_user) -> User:
    return make_user("alice")


@pytest.fixture()
def bob(make_user) -> User:
    return make_user("bob")


@pytest.fixture()
def carol(make_user) -> User:
    return make_user("carol")


@pytest.fixture()
def dave(make_user) -> User:
    return make_user("dave")


@pytest.fixture()
def post(make_post, alice) -> Post:
    return make_post(alice, title="Alice's first video", tags=["music", "live"])
