# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-clawdev")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from clawdev.core.security import CredentialStore
from clawdev.core.settings import Settings
from clawdev.db.session import Base
from clawdev.db.session import get_db as app_get_session
from clawdev.main import app as fastapi_app
from clawdev.models import Bot, User, UserRole
from clawdev.services.identity import create_access_token

TEST_DB_URL = "sqlite://"

_TEST_SETTINGS_INSTANCE = Settings()  # type: ignore[call-arg]


@pytest.fixture(scope="session")
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
        # Services commit, so every test cleans up the tables it touched.
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


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance aligned with runtime configuration."""
    return _TEST_SETTINGS_INSTANCE


def _make_user(db_session: Session, user_id: str, name: str, role: UserRole = UserRole.USER) -> User:
    user = User(id=user_id, name=name, image=f"https://img.test/{user_id}.png", role=role)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _headers_for(user: User, settings: Settings) -> dict[str, str]:
    token = create_access_token(user.id, settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def owner(db_session: Session) -> User:
    """The human who owns the test bots."""
    return _make_user(db_session, "user-owner", "Olivia Owner")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """A human with no relation to the owner's posts or bots."""
    return _make_user(db_session, "user-other", "Oscar Other")


@pytest.fixture()
def admin_user(db_session: Session) -> User:
    return _make_user(db_session, "user-admin", "Ada Admin", role=UserRole.ADMIN)


@pytest.fixture()
def owner_headers(owner: User, test_settings: Settings) -> dict[str, str]:
    """Return authorization headers for the owner's session."""
    return _headers_for(owner, test_settings)


@pytest.fixture()
def other_headers(other_user: User, test_settings: Settings) -> dict[str, str]:
    return _headers_for(other_user, test_settings)


@pytest.fixture()
def admin_headers(admin_user: User, test_settings: Settings) -> dict[str, str]:
    return _headers_for(admin_user, test_settings)


@pytest.fixture()
def make_bot(db_session: Session) -> Callable[..., tuple[Bot, dict[str, str]]]:
    """Return a factory creating a bot for a user plus headers carrying its key."""
    store = CredentialStore()

    def _make_bot(bot_owner: User, name: str = "Test Bot", **flags: Any) -> tuple[Bot, dict[str, str]]:
        key = store.issue()
        bot = Bot(
            name=name,
            avatar=f"https://img.test/{name.lower().replace(' ', '-')}.png",
            api_key_hash=key.hash,
            api_key_hint=key.hint,
            owner_id=bot_owner.id,
            **flags,
        )
        db_session.add(bot)
        db_session.commit()
        db_session.refresh(bot)
        return bot, {"Authorization": f"Bearer {key.plaintext}"}

    return _make_bot


@pytest.fixture()
def draft_bot(make_bot, owner: User) -> tuple[Bot, dict[str, str]]:
    """Untrusted bot: may draft and comment, may not publish."""
    return make_bot(owner, "Draft Bot")


@pytest.fixture()
def bot_headers(draft_bot: tuple[Bot, dict[str, str]]) -> dict[str, str]:
    return draft_bot[1]


@pytest.fixture()
def trusted_bot(make_bot, owner: User) -> tuple[Bot, dict[str, str]]:
    return make_bot(owner, "Trusted Bot", trusted=True, can_publish=True)


@pytest.fixture()
def trusted_bot_headers(trusted_bot: tuple[Bot, dict[str, str]]) -> dict[str, str]:
    return trusted_bot[1]


@pytest.fixture()
def other_bot_headers(make_bot, other_user: User) -> dict[str, str]:
    """Headers for a bot owned by ``other_user``."""
    _, headers = make_bot(other_user, "Stranger Bot")
    return headers


def create_post(client: TestClient, headers: dict[str, str], **payload: Any) -> dict[str, Any]:
    """Create a draft through the API and return its JSON body."""
    body = {"title": "Hello World", "body": "First post body", **payload}
    response = client.post("/api/v1/posts", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture()
def post_factory(client: TestClient) -> Callable[..., dict[str, Any]]:
    def _factory(headers: dict[str, str], **payload: Any) -> dict[str, Any]:
        return create_post(client, headers, **payload)

    return _factory
