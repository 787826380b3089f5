"""Unit tests for the request authentication gate (labnote/middleware/auth.py)."""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient

from labnote.api.errors import register_exception_handlers
from labnote.database import get_db_session
from labnote.middleware.auth import authenticate, get_current_user
from labnote.security.jwt import TokenService

SECRET = "gate-secret-0123456789-0123456789-abcdef"


class CountingTokenService(TokenService):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.verified = 0

    def verify(self, token):
        self.verified += 1
        return super().verify(token)


@pytest.fixture
def tokens():
    return CountingTokenService(SECRET, "HS256")


@pytest.fixture
def gate_app(session_factory, tokens):
    app = FastAPI()
    app.state.token_service = tokens
    register_exception_handlers(app)

    async def _db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _db

    @app.get("/whoami")
    async def whoami(user=Depends(authenticate)):
        return {"username": user.username if user else None}

    @app.get("/protected")
    async def protected(user=Depends(get_current_user), again=Depends(authenticate)):
        return {"username": user.username, "same": again is user}

    return app


@pytest.fixture
async def client(gate_app):
    async with AsyncClient(transport=ASGITransport(app=gate_app), base_url="http://test") as ac:
        yield ac


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_missing_header_is_anonymous(client):
    assert (await client.get("/whoami")).json() == {"username": None}

    resp = await client.get("/protected")
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_valid_token_binds_principal(client, make_user, tokens):
    user = await make_user("marie")

    resp = await client.get("/protected", headers=_bearer(tokens.issue(user)))

    assert resp.status_code == 200
    assert resp.json() == {"username": "marie", "same": True}
    assert tokens.verified == 1


@pytest.mark.asyncio
async def test_expired_token_is_anonymous(client, make_user):
    user = await make_user("marie")
    past = TokenService(SECRET, "HS256", clock=lambda: datetime(2020, 1, 1, tzinfo=timezone.utc))

    headers = _bearer(past.issue(user))

    assert (await client.get("/whoami", headers=headers)).json() == {"username": None}
    assert (await client.get("/protected", headers=headers)).status_code == 401


@pytest.mark.asyncio
async def test_malformed_token_is_anonymous(client):
    headers = _bearer("definitely.not.valid")

    assert (await client.get("/whoami", headers=headers)).json() == {"username": None}
    assert (await client.get("/protected", headers=headers)).status_code == 401


@pytest.mark.asyncio
async def test_token_for_missing_user_is_anonymous(client, tokens):
    ghost = SimpleNamespace(id=uuid.uuid4(), username="ghost", email=None, picture=None, provider=None)

    resp = await client.get("/protected", headers=_bearer(tokens.issue(ghost)))

    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_non_bearer_scheme_is_anonymous(client):
    resp = await client.get("/whoami", headers={"Authorization": "Basic bWFyaWU6cmFkaXVt"})
    assert resp.json() == {"username": None}
