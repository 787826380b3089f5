"""Authentication API endpoints."""

import logging
import secrets
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.errors import FederationError, NotFound, ValidationFailed
from ..core.redis_client import RedisClient, get_redis_client
from ..core.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UsernameAvailability,
)
from ..core.services import AuthService, IdentityService
from ..database import get_db_session
from ..middleware.auth import get_token_service
from ..security.jwt import TokenService
from ..security.oauth import OAuthClient, OAuthProvider, configured_providers

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def get_oauth_client(settings: Settings = Depends(get_settings)) -> OAuthClient:
    return OAuthClient(timeout_seconds=settings.oauth2_http_timeout_seconds)


def _provider_or_404(provider: str, settings: Settings) -> OAuthProvider:
    registration = configured_providers(settings).get(provider)
    if registration is None:
        raise NotFound("Unknown identity provider", provider=provider)
    return registration


def _callback_uri(settings: Settings, provider: str) -> str:
    base = settings.oauth2_callback_base_url.rstrip("/")
    return f"{base}/api/auth/oauth2/{provider}/callback"


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),
    token_service: TokenService = Depends(get_token_service),
):
    """Register a new user and sign them in."""
    auth_service = AuthService(session, token_service)
    return await auth_service.register_user(request)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
    token_service: TokenService = Depends(get_token_service),
):
    """Exchange a username and password for an access token."""
    auth_service = AuthService(session, token_service)
    return await auth_service.authenticate_user(request)


@router.get("/check-username", response_model=UsernameAvailability)
async def check_username(
    username: str = Query(..., min_length=1, max_length=255),
    session: AsyncSession = Depends(get_db_session),
    token_service: TokenService = Depends(get_token_service),
):
    auth_service = AuthService(session, token_service)
    return UsernameAvailability(available=await auth_service.is_username_available(username))


@router.get("/oauth2/{provider}/authorize", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
async def oauth2_authorize(
    provider: str,
    settings: Settings = Depends(get_settings),
    redis_client: RedisClient = Depends(get_redis_client),
):
    """Send the browser to the provider's consent page."""
    registration = _provider_or_404(provider, settings)
    state = secrets.token_urlsafe(32)
    stored = await redis_client.store_oauth_state(
        state, {"provider": provider}, settings.oauth2_state_ttl_seconds
    )
    if not stored:
        raise FederationError("Login state could not be stored", provider=provider)

    return RedirectResponse(
        registration.authorization_url(_callback_uri(settings, provider), state)
    )


@router.get("/oauth2/{provider}/callback", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
async def oauth2_callback(
    provider: str,
    code: str = Query(...),
    state: str = Query(...),
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(get_db_session),
    token_service: TokenService = Depends(get_token_service),
    redis_client: RedisClient = Depends(get_redis_client),
    oauth_client: OAuthClient = Depends(get_oauth_client),
):
    """Finish a provider login and hand the token to the frontend."""
    registration = _provider_or_404(provider, settings)

    attempt = await redis_client.consume_oauth_state(state)
    if attempt is None or attempt.get("provider") != provider:
        logger.warning("OAuth2 callback with unknown state", extra={"provider": provider})
        raise ValidationFailed("Invalid or expired login state")

    profile = await oauth_client.fetch_profile(
        registration, code, _callback_uri(settings, provider)
    )
    user = await IdentityService(session).resolve_or_create_federated(
        profile.provider, profile.email, {"picture": profile.picture, "name": profile.name}
    )
    token = AuthService(session, token_service).issue_token(user)

    return RedirectResponse(
        f"{settings.oauth2_redirect_url}?{urlencode({'token': token.access_token})}"
    )
