"""
Unit tests for the OAuth2 provider client.
"""

import asyncio
import json
from urllib.parse import parse_qs, urlparse

import aiohttp
import pytest

from labnote.config import Settings
from labnote.core.errors import FederationError
from labnote.security.oauth import OAuthClient, configured_providers


@pytest.fixture
def settings():
    return Settings(
        google_client_id="g-id",
        google_client_secret="g-secret",
        github_client_id="gh-id",
        github_client_secret="gh-secret",
    )


def test_only_configured_providers_are_enabled():
    assert configured_providers(Settings(google_client_id="", github_client_id="")) == {}
    assert set(configured_providers(Settings(github_client_id="gh-id"))) == {"github"}


def test_authorization_url_carries_state_and_redirect(settings):
    google = configured_providers(settings)["google"]

    url = urlparse(google.authorization_url("http://localhost:8000/cb", "state-123"))
    query = parse_qs(url.query)

    assert url.netloc == "accounts.google.com"
    assert query["client_id"] == ["g-id"]
    assert query["redirect_uri"] == ["http://localhost:8000/cb"]
    assert query["state"] == ["state-123"]
    assert query["response_type"] == ["code"]


@pytest.mark.asyncio
async def test_fetch_profile_reads_userinfo(monkeypatch, settings):
    google = configured_providers(settings)["google"]
    client = OAuthClient(timeout_seconds=1)

    async def fake_exchange(self, session, provider, code, redirect_uri):
        assert code == "the-code"
        return "access-token"

    async def fake_get_json(self, session, url, access_token):
        assert access_token == "access-token"
        return {"email": "marie@example.org", "picture": "https://img/p.png", "name": "Marie"}

    monkeypatch.setattr(OAuthClient, "_exchange_code", fake_exchange)
    monkeypatch.setattr(OAuthClient, "_get_json", fake_get_json)

    profile = await client.fetch_profile(google, "the-code", "http://cb")

    assert profile.provider == "google"
    assert profile.email == "marie@example.org"
    assert profile.picture == "https://img/p.png"


@pytest.mark.asyncio
async def test_github_falls_back_to_primary_verified_email(monkeypatch, settings):
    github = configured_providers(settings)["github"]

    async def fake_exchange(self, session, provider, code, redirect_uri):
        return "tok"

    async def fake_get_json(self, session, url, access_token):
        if url == github.emails_url:
            return [
                {"email": "old@example.org", "primary": False, "verified": True},
                {"email": "main@example.org", "primary": True, "verified": True},
            ]
        return {"email": None, "avatar_url": "https://avatars/1"}

    monkeypatch.setattr(OAuthClient, "_exchange_code", fake_exchange)
    monkeypatch.setattr(OAuthClient, "_get_json", fake_get_json)

    profile = await OAuthClient().fetch_profile(github, "c", "http://cb")

    assert profile.email == "main@example.org"
    assert profile.picture == "https://avatars/1"


@pytest.mark.asyncio
async def test_provider_http_failure_becomes_federation_error(monkeypatch, settings):
    google = configured_providers(settings)["google"]

    async def failing_exchange(self, session, provider, code, redirect_uri):
        raise aiohttp.ClientConnectionError("connection refused")

    monkeypatch.setattr(OAuthClient, "_exchange_code", failing_exchange)

    with pytest.raises(FederationError):
        await OAuthClient().fetch_profile(google, "c", "http://cb")


@pytest.mark.asyncio
async def test_missing_email_becomes_federation_error(monkeypatch, settings):
    google = configured_providers(settings)["google"]

    async def fake_exchange(self, session, provider, code, redirect_uri):
        return "tok"

    async def fake_get_json(self, session, url, access_token):
        return {"name": "No Mail"}

    monkeypatch.setattr(OAuthClient, "_exchange_code", fake_exchange)
    monkeypatch.setattr(OAuthClient, "_get_json", fake_get_json)

    with pytest.raises(FederationError):
        await OAuthClient().fetch_profile(google, "c", "http://cb")


@pytest.mark.asyncio
async def test_provider_timeout_becomes_federation_error(monkeypatch, settings):
    google = configured_providers(settings)["google"]

    async def slow_exchange(self, session, provider, code, redirect_uri):
        raise asyncio.TimeoutError()

    monkeypatch.setattr(OAuthClient, "_exchange_code", slow_exchange)

    with pytest.raises(FederationError) as exc_info:
        await OAuthClient(timeout_seconds=0.3).fetch_profile(google, "c", "http://cb")

    assert "in time" in exc_info.value.message


@pytest.mark.asyncio
async def test_non_json_userinfo_becomes_federation_error(monkeypatch, settings):
    google = configured_providers(settings)["google"]

    async def fake_exchange(self, session, provider, code, redirect_uri):
        return "tok"

    async def html_body(self, session, url, access_token):
        return json.loads("<html>maintenance</html>")

    monkeypatch.setattr(OAuthClient, "_exchange_code", fake_exchange)
    monkeypatch.setattr(OAuthClient, "_get_json", html_body)

    with pytest.raises(FederationError):
        await OAuthClient().fetch_profile(google, "c", "http://cb")


@pytest.mark.asyncio
async def test_list_shaped_userinfo_becomes_federation_error(monkeypatch, settings):
    google = configured_providers(settings)["google"]

    async def fake_exchange(self, session, provider, code, redirect_uri):
        return "tok"

    async def list_body(self, session, url, access_token):
        return [{"email": "marie@example.org"}]

    monkeypatch.setattr(OAuthClient, "_exchange_code", fake_exchange)
    monkeypatch.setattr(OAuthClient, "_get_json", list_body)

    with pytest.raises(FederationError):
        await OAuthClient().fetch_profile(google, "c", "http://cb")
