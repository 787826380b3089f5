"""OAuth2 authorization-code flow against external identity providers."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import aiohttp

from ..config import Settings
from ..core.errors import FederationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OAuthProvider:
    """Endpoints and credentials for one provider registration."""

    name: str
    client_id: str
    client_secret: str
    authorize_url: str
    token_url: str
    userinfo_url: str
    scope: str
    # GitHub hides private addresses from the profile; they come from here
    emails_url: Optional[str] = None

    def authorization_url(self, redirect_uri: str, state: str) -> str:
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": redirect_uri,
                "response_type": "code",
                "scope": self.scope,
                "state": state,
            }
        )
        return f"{self.authorize_url}?{query}"


@dataclass(frozen=True)
class FederatedProfile:
    provider: str
    email: str
    picture: Optional[str] = None
    name: Optional[str] = None


def configured_providers(settings: Settings) -> Dict[str, OAuthProvider]:
    """Providers whose client id is configured."""
    providers = {}
    if settings.google_client_id:
        providers["google"] = OAuthProvider(
            name="google",
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
            token_url="https://oauth2.googleapis.com/token",
            userinfo_url="https://openidconnect.googleapis.com/v1/userinfo",
            scope="openid email profile",
        )
    if settings.github_client_id:
        providers["github"] = OAuthProvider(
            name="github",
            client_id=settings.github_client_id,
            client_secret=settings.github_client_secret,
            authorize_url="https://github.com/login/oauth/authorize",
            token_url="https://github.com/login/oauth/access_token",
            userinfo_url="https://api.github.com/user",
            scope="read:user user:email",
            emails_url="https://api.github.com/user/emails",
        )
    return providers


class OAuthClient:
    """Exchanges an authorization code for the caller's profile."""

    def __init__(self, timeout_seconds: float = 10.0):
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def fetch_profile(
        self, provider: OAuthProvider, code: str, redirect_uri: str
    ) -> FederatedProfile:
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                access_token = await self._exchange_code(session, provider, code, redirect_uri)
                info = await self._get_json(session, provider.userinfo_url, access_token)
                if not isinstance(info, dict):
                    raise FederationError(f"{provider.name} returned an unexpected profile")
                email = info.get("email")
                if not email and provider.emails_url:
                    email = await self._primary_email(session, provider.emails_url, access_token)
        except aiohttp.ClientError as exc:
            logger.warning(
                "OAuth2 provider request failed",
                extra={"provider": provider.name, "error": str(exc)},
            )
            raise FederationError(f"{provider.name} request failed") from exc
        except asyncio.TimeoutError as exc:
            logger.warning("OAuth2 provider timed out", extra={"provider": provider.name})
            raise FederationError(f"{provider.name} did not answer in time") from exc
        except ValueError as exc:
            # body was not JSON
            logger.warning(
                "OAuth2 provider sent an unreadable response",
                extra={"provider": provider.name, "error": str(exc)},
            )
            raise FederationError(f"{provider.name} returned an unreadable response") from exc

        if not email:
            raise FederationError(f"{provider.name} did not return an email address")

        return FederatedProfile(
            provider=provider.name,
            email=email,
            picture=info.get("picture") or info.get("avatar_url"),
            name=info.get("name"),
        )

    async def _exchange_code(
        self,
        session: aiohttp.ClientSession,
        provider: OAuthProvider,
        code: str,
        redirect_uri: str,
    ) -> str:
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
            "client_id": provider.client_id,
            "client_secret": provider.client_secret,
        }
        async with session.post(
            provider.token_url, data=data, headers={"Accept": "application/json"}
        ) as resp:
            resp.raise_for_status()
            payload = await resp.json(content_type=None)

        if not isinstance(payload, dict):
            raise FederationError(f"{provider.name} token exchange failed")
        token = payload.get("access_token")
        if not token:
            raise FederationError(
                f"{provider.name} token exchange failed", error=payload.get("error")
            )
        return token

    async def _get_json(
        self, session: aiohttp.ClientSession, url: str, access_token: str
    ) -> Any:
        headers = {"Authorization": f"Bearer {access_token}", "Accept": "application/json"}
        async with session.get(url, headers=headers) as resp:
            resp.raise_for_status()
            return await resp.json(content_type=None)

    async def _primary_email(
        self, session: aiohttp.ClientSession, url: str, access_token: str
    ) -> Optional[str]:
        emails = await self._get_json(session, url, access_token)
        if not isinstance(emails, list):
            return None
        for item in emails:
            if isinstance(item, dict) and item.get("primary") and item.get("verified"):
                return item.get("email")
        return None
