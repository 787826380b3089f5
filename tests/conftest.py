"""Shared pytest fixtures configured to use SQLite in-memory for tests."""

import logging
import os
from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Tell app lifespan to skip real DB init
os.environ["LABNOTE_SKIP_LIFESPAN_DB"] = "1"

from labnote.core.models import BaseModel, User  # noqa: E402
from labnote.security.jwt import TokenService  # noqa: E402
from labnote.security.password import hash_password  # noqa: E402

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

TEST_PASSWORD = "correct-horse-battery"
TEST_SECRET = "test-secret-key-that-is-long-enough-0123"

# bcrypt is slow on purpose; hash once for every fixture user
_TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture
async def test_engine():
    """Fresh SQLite in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )

    # SQLite only enforces CASCADE/SET NULL with foreign keys switched on
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest.fixture
async def test_session(session_factory):
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def token_service():
    return TokenService(TEST_SECRET, "HS256")


@pytest.fixture
def make_user(test_session):
    """Factory persisting a password user; email defaults to <username>@example.org."""

    async def _make(username: str, email: Optional[str] = None, **fields) -> User:
        user = User(
            username=username,
            email=email or f"{username}@example.org",
            password_hash=_TEST_PASSWORD_HASH,
            **fields,
        )
        test_session.add(user)
        await test_session.commit()
        return user

    return _make


@pytest.fixture
def test_app(session_factory):
    """The application wired to the in-memory database, one session per request."""
    from labnote.database import get_db_session
    from labnote.main import app

    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    """Create async test client; the lifespan does not run under ASGITransport."""
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register(async_client):
    """Register through the API and return (token, user json)."""

    async def _register(username: str, email: Optional[str] = None):
        resp = await async_client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@example.org",
                "password": TEST_PASSWORD,
            },
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return body["access_token"], body["user"]

    return _register
