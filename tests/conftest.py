from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
import os
from pathlib import Path
import sys
import tempfile

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import Session, sessionmaker

from humbl import dependencies
from humbl.dependencies import get_db_session, get_settings
from humbl.auth import token_registry
from humbl.config import Settings
from humbl.infrastructure.database import Base

import humbl.auth.dependencies as auth_dependencies
import humbl.auth.user_manager as auth_user_manager

# Imported before any patching so their Depends bind the original providers,
# which the app fixture then overrides per test.
import humbl.admin.dependencies  # noqa: F401
import humbl.chat.dependencies  # noqa: F401
import humbl.conversations.dependencies  # noqa: F401
import humbl.engagement.dependencies  # noqa: F401
import humbl.folders.dependencies  # noqa: F401
import humbl.media.dependencies  # noqa: F401
import humbl.shares.dependencies  # noqa: F401

DEFAULT_PASSWORD = "SuperSecret1!"


class AsyncSessionWrapper:
    """Minimal async-compatible wrapper around a synchronous SQLAlchemy session."""

    def __init__(self, sync_session: Session) -> None:
        self._sync = sync_session

    def add(self, instance: object) -> None:
        self._sync.add(instance)

    async def execute(self, statement, *args, **kwargs):
        return self._sync.execute(statement, *args, **kwargs)

    async def get(self, entity, ident, **kwargs):
        return self._sync.get(entity, ident, **kwargs)

    async def commit(self) -> None:
        self._sync.commit()

    async def rollback(self) -> None:
        self._sync.rollback()

    async def flush(self) -> None:
        self._sync.flush()

    async def refresh(self, instance: object) -> None:
        self._sync.refresh(instance)

    async def delete(self, instance: object) -> None:
        self._sync.delete(instance)

    async def close(self) -> None:
        self._sync.close()

    def __getattr__(self, item: str):
        return getattr(self._sync, item)


class AsyncSessionContext:
    def __init__(self, factory: sessionmaker) -> None:
        self._factory = factory
        self._sync: Session | None = None

    async def __aenter__(self) -> AsyncSessionWrapper:
        self._sync = self._factory()
        return AsyncSessionWrapper(self._sync)

    async def __aexit__(self, exc_type, exc, tb) -> None:
        assert self._sync is not None
        if exc_type is not None:
            self._sync.rollback()
        self._sync.close()


class AsyncSessionFactory:
    def __init__(self, factory: sessionmaker) -> None:
        self._factory = factory

    def __call__(self) -> AsyncSessionContext:
        return AsyncSessionContext(self._factory)


@pytest.fixture
def settings() -> Settings:
    settings = Settings()
    settings.fastapi.secret_key = "test-secret"
    return settings


@pytest.fixture
def app(monkeypatch: pytest.MonkeyPatch, settings: Settings) -> Iterator[FastAPI]:
    """Provide a FastAPI app wired to a temporary SQLite database."""

    if hasattr(dependencies.get_settings, "cache_clear"):
        dependencies.get_settings.cache_clear()
    token_registry.clear()

    fd, db_path = tempfile.mkstemp(prefix="humbl_tests_", suffix=".db")
    os.close(fd)
    engine = create_engine(
        f"sqlite:///{db_path}",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    sync_session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    session_factory = AsyncSessionFactory(sync_session_factory)

    async def _get_db_session():
        async with session_factory() as session:
            yield session

    def _get_session_factory() -> AsyncSessionFactory:
        return session_factory

    def _get_settings() -> Settings:
        return settings

    monkeypatch.setattr(dependencies, "get_db_session", _get_db_session)
    monkeypatch.setattr(dependencies, "get_session_factory", _get_session_factory)
    monkeypatch.setattr(dependencies, "get_settings", _get_settings)
    monkeypatch.setattr(auth_dependencies, "get_settings", _get_settings)
    monkeypatch.setattr(auth_user_manager, "get_db_session", _get_db_session)
    monkeypatch.setattr(auth_user_manager, "get_settings", _get_settings)

    from humbl.main import create_app

    app = create_app()
    app.dependency_overrides[get_db_session] = _get_db_session
    app.dependency_overrides[get_settings] = _get_settings
    app.state._session_factory = session_factory  # type: ignore[attr-defined]

    try:
        yield app
    finally:
        app.dependency_overrides.clear()
        token_registry.clear()
        engine.dispose()
        try:
            os.remove(db_path)
        except OSError:
            pass


@pytest.fixture
def session_factory(app: FastAPI) -> AsyncSessionFactory:
    """Expose the session factory for direct database access in tests."""

    return app.state._session_factory  # type: ignore[attr-defined]


@pytest.fixture
def login() -> Callable[..., Awaitable[dict[str, str]]]:
    """Register (unless told otherwise) and log in, returning bearer headers."""

    async def _login(
        client: AsyncClient, email: str, password: str = DEFAULT_PASSWORD, *, register: bool = True
    ) -> dict[str, str]:
        if register:
            response = await client.post(
                "/auth/register", json={"email": email, "password": password, "full_name": email.split("@")[0]}
            )
            assert response.status_code == 201, response.text
        response = await client.post("/auth/jwt/login", data={"username": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login
