"""Mapping of domain errors onto HTTP responses."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from labnote.api import errors as error_module
from labnote.api.errors import register_exception_handlers, status_for
from labnote.config import Settings
from labnote.core.errors import (
    AccessDenied,
    Conflict,
    FederationError,
    InvalidCredentials,
    NotFound,
    NotOwner,
    SelfReference,
    Unauthenticated,
    UnknownUser,
    ValidationFailed,
    VersionMismatch,
    VersionNotFound,
)


@pytest.mark.parametrize(
    "error, expected",
    [
        (Unauthenticated(), 401),
        (InvalidCredentials(), 401),
        (NotFound(), 404),
        (VersionNotFound(), 404),
        (UnknownUser(), 404),
        (Conflict(), 400),
        (ValidationFailed(), 400),
        (SelfReference(), 400),
        (FederationError(), 502),
    ],
)
def test_status_for(error, expected):
    assert status_for(error) == expected


@pytest.mark.parametrize("error", [AccessDenied(), NotOwner(), VersionMismatch()])
def test_denials_are_concealed_by_default(error):
    assert status_for(error) == 404
    assert status_for(error, conceal_forbidden=False) == 403


def _app_raising(exc):
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    async def boom():
        raise exc

    return app


async def _get(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        return await client.get("/boom")


@pytest.mark.asyncio
async def test_concealed_denial_looks_like_not_found():
    denied = await _get(_app_raising(AccessDenied("Entry not accessible", entry_id="e-1")))
    missing = await _get(_app_raising(NotFound()))

    assert denied.status_code == missing.status_code == 404
    assert denied.json()["error"] == missing.json()["error"] == "NotFound"
    assert denied.json()["message"] == missing.json()["message"]
    assert denied.json()["details"] is None


@pytest.mark.asyncio
async def test_denial_visible_when_concealment_disabled(monkeypatch):
    monkeypatch.setattr(
        error_module, "get_settings", lambda: Settings(conceal_forbidden_resources=False)
    )

    resp = await _get(_app_raising(NotOwner(project_id="p-1")))

    assert resp.status_code == 403
    assert resp.json()["error"] == "NotOwner"
    assert resp.json()["details"] == {"project_id": "p-1"}


@pytest.mark.asyncio
async def test_conflict_body():
    resp = await _get(_app_raising(Conflict("Username already taken", field="username")))

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Conflict"
    assert body["message"] == "Username already taken"
    assert body["details"] == {"field": "username"}
    assert "timestamp" in body


@pytest.mark.asyncio
async def test_unauthenticated_sets_challenge_header():
    resp = await _get(_app_raising(InvalidCredentials()))

    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"
