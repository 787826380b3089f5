"""Authentication dependencies - bind the request principal from a bearer token."""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import TokenExpired, TokenMalformed, Unauthenticated
from ..core.models.user import User
from ..core.services.identity_service import IdentityService
from ..database import get_db_session
from ..security.jwt import TokenService

logger = logging.getLogger(__name__)


def get_token_service(request: Request) -> TokenService:
    """The process-wide token service built at startup."""
    return request.app.state.token_service


class PrincipalGate(HTTPBearer):
    """Resolve ``Authorization: Bearer <token>`` to a User, or None.

    Never raises for a missing, expired or malformed token: the request
    simply stays anonymous and the route decides whether that is allowed.
    The result is kept on ``request.state.principal`` so a request is
    verified once no matter how many dependencies ask.
    """

    def __init__(self):
        super().__init__(auto_error=False)

    async def __call__(
        self,
        request: Request,
        session: AsyncSession = Depends(get_db_session),
        token_service: TokenService = Depends(get_token_service),
    ) -> Optional[User]:
        if hasattr(request.state, "principal"):
            return request.state.principal

        principal = None
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        if credentials is not None:
            principal = await self._resolve(credentials.credentials, session, token_service)

        request.state.principal = principal
        return principal

    async def _resolve(
        self, token: str, session: AsyncSession, token_service: TokenService
    ) -> Optional[User]:
        try:
            identity = token_service.verify(token)
        except TokenExpired:
            logger.info("Expired token presented, continuing anonymously")
            return None
        except TokenMalformed as exc:
            logger.info("Invalid token presented, continuing anonymously", extra={"reason": str(exc)})
            return None

        user = await IdentityService(session).resolve_by_id(identity.user_id)
        if user is None:
            logger.info(
                "Token subject no longer exists", extra={"user_id": str(identity.user_id)}
            )
        return user


authenticate = PrincipalGate()


async def get_current_user(principal: Optional[User] = Depends(authenticate)) -> User:
    """Principal for protected routes; anonymous callers get Unauthenticated."""
    if principal is None:
        raise Unauthenticated()
    return principal
