"""Authentication and account service implementation."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...security.jwt import TokenService
from ...security.password import hash_password, verify_password
from ..errors import Conflict, InvalidCredentials
from ..models.user import User
from ..repositories.entry_repository import EntryRepository
from ..repositories.entry_version_repository import EntryVersionRepository
from ..repositories.project_repository import ProjectRepository
from ..repositories.template_repository import TemplateRepository
from ..repositories.user_repository import UserRepository
from ..schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdateRequest,
)
from .interfaces import IAuthService

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """Registration, password login and the signed-in user's account."""

    def __init__(self, session: AsyncSession, token_service: TokenService):
        self.session = session
        self.token_service = token_service
        self.user_repo = UserRepository(session)

    def issue_token(self, user: User) -> TokenResponse:
        return TokenResponse(
            access_token=self.token_service.issue(user),
            token_type="bearer",
            expires_in=self.token_service.lifetime_seconds,
            user=UserResponse.model_validate(user),
        )

    async def register_user(self, request: RegisterRequest) -> TokenResponse:
        """Register new user and sign them in."""
        if await self.user_repo.is_username_taken(request.username):
            raise Conflict("Username already taken", field="username")
        if await self.user_repo.is_email_taken(request.email):
            raise Conflict("Email already registered", field="email")

        try:
            user = await self.user_repo.create_user(
                {
                    "username": request.username,
                    "email": request.email,
                    "password_hash": hash_password(request.password),
                }
            )
            await self.session.commit()
        except IntegrityError as exc:
            # lost a race with a concurrent registration
            await self.session.rollback()
            raise Conflict("Username or email already taken") from exc

        logger.info("User registered", extra={"user_id": str(user.id)})
        return self.issue_token(user)

    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        """Login user and return a JWT."""
        user = await self.user_repo.get_by_username(request.username)
        if not user or not verify_password(request.password, user.password_hash):
            logger.info("Login failed", extra={"username": request.username})
            raise InvalidCredentials()

        return self.issue_token(user)

    async def is_username_available(self, username: str) -> bool:
        return not await self.user_repo.is_username_taken(username)

    async def get_current_user(self, user: User) -> UserResponse:
        return UserResponse.model_validate(user)

    async def update_username(self, user: User, request: UserUpdateRequest) -> TokenResponse:
        """Change the handle and hand back a token carrying the new one."""
        if request.username != user.username:
            if await self.user_repo.is_username_taken(request.username):
                raise Conflict("Username already taken", field="username")
            try:
                await self.user_repo.update_user(user, {"username": request.username})
                await self.session.commit()
            except IntegrityError as exc:
                await self.session.rollback()
                raise Conflict("Username already taken", field="username") from exc
            logger.info("Username changed", extra={"user_id": str(user.id)})

        return self.issue_token(user)

    async def delete_account(self, user: User) -> None:
        """Delete the user and everything they own, in one transaction.

        Their entries (and the entries' history) go away. Entries other
        people filed under the user's projects move to those people's
        uncategorized space before the projects are deleted.
        """
        entry_repo = EntryRepository(self.session)
        project_repo = ProjectRepository(self.session)

        deleted_entries = await entry_repo.delete_by_author(user.id)
        owned_project_ids = await project_repo.list_owned_ids(user.id)
        await entry_repo.detach_from_projects(owned_project_ids)
        await project_repo.remove_memberships(user.id)
        await project_repo.delete_owned(user.id)
        await TemplateRepository(self.session).delete_by_owner(user.id)
        await EntryVersionRepository(self.session).clear_modified_by(user.id)
        await self.user_repo.delete_user(user)
        await self.session.commit()

        logger.info(
            "Account deleted",
            extra={
                "user_id": str(user.id),
                "entries_deleted": deleted_entries,
                "projects_deleted": len(owned_project_ids),
            },
        )
