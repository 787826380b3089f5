"""Identity resolution - token subjects and federated logins to User rows."""

import logging
import secrets
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...security.password import unusable_password_hash
from ..errors import Conflict, NotFound
from ..models.user import User
from ..repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class IdentityService:
    """Maps identities to users, creating federated accounts on first login."""

    CREATE_ATTEMPTS = 2

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    async def resolve_by_id(self, user_id: UUID) -> Optional[User]:
        return await self.user_repo.get_by_id(user_id)

    async def resolve_by_handle(self, handle: str) -> User:
        user = await self.user_repo.get_by_username(handle)
        if user is None:
            raise NotFound("User not found", username=handle)
        return user

    async def resolve_or_create_federated(
        self, provider: str, email: str, hints: Optional[Dict[str, Any]] = None
    ) -> User:
        """Upsert the user keyed by ``email``, compared case-insensitively.

        New users get the lower-cased ``email`` as their handle (suffixed if a
        local account already uses it) and a password nobody knows. Existing
        users get their provider tag and profile hints refreshed. Losing a
        creation race to a concurrent login is treated as "already exists";
        losing it on the handle gets one more try with a fresh suffix.
        """
        hints = hints or {}
        email = email.strip().lower()
        user = await self.user_repo.get_by_email(email)

        attempts = 0
        while user is None:
            attempts += 1
            try:
                user = await self._create_federated(provider, email, hints)
                await self.session.commit()
                logger.info(
                    "Federated user created",
                    extra={"user_id": str(user.id), "provider": provider},
                )
                return user
            except IntegrityError:
                await self.session.rollback()
                user = await self.user_repo.get_by_email(email)
                if user is None and attempts >= self.CREATE_ATTEMPTS:
                    raise Conflict("Could not create federated account", email=email)
                logger.info(
                    "Federated user created concurrently, retrying",
                    extra={"provider": provider, "handle_clash": user is None},
                )

        user.provider = provider
        if hints.get("picture"):
            user.picture = hints["picture"]
        await self.session.commit()
        logger.info(
            "Federated user refreshed", extra={"user_id": str(user.id), "provider": provider}
        )
        return user

    async def _create_federated(self, provider: str, email: str, hints: Dict[str, Any]) -> User:
        handle = email
        if await self.user_repo.is_username_taken(handle):
            handle = f"{email}-{secrets.token_hex(3)}"
        return await self.user_repo.create_user(
            {
                "username": handle,
                "email": email,
                "provider": provider,
                "picture": hints.get("picture"),
                "password_hash": unusable_password_hash(),
            }
        )
