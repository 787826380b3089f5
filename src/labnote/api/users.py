"""Signed-in user's account endpoints."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.models.user import User
from ..core.schemas.auth import TokenResponse, UserResponse, UserUpdateRequest
from ..core.services import AuthService
from ..database import get_db_session
from ..middleware.auth import get_current_user, get_token_service
from ..security.jwt import TokenService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    token_service: TokenService = Depends(get_token_service),
):
    """Get current user profile."""
    auth_service = AuthService(session, token_service)
    return await auth_service.get_current_user(current_user)


@router.put("/me", response_model=TokenResponse)
async def rename_me(
    request: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    token_service: TokenService = Depends(get_token_service),
):
    """Change the username; the response carries a token with the new claims."""
    auth_service = AuthService(session, token_service)
    return await auth_service.update_username(current_user, request)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    token_service: TokenService = Depends(get_token_service),
):
    """Delete the account together with everything it owns."""
    auth_service = AuthService(session, token_service)
    await auth_service.delete_account(current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
