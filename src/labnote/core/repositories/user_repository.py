"""User repository for database operations."""

from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import User


class UserRepository:
    """Repository for user database operations.

    Writes are flushed, not committed; the calling service decides when the
    unit of work ends.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_user(self, user_data: dict) -> User:
        """Create new user."""
        user = User(**user_data)
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email, ignoring case."""
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_user(self, user: User, update_data: dict) -> User:
        """Apply field changes to a loaded user."""
        for key, value in update_data.items():
            setattr(user, key, value)
        await self.session.flush()
        return user

    async def delete_user(self, user: User) -> None:
        """Delete user."""
        await self.session.delete(user)
        await self.session.flush()

    async def is_username_taken(self, username: str) -> bool:
        """Check if username exists."""
        return await self.get_by_username(username) is not None

    async def is_email_taken(self, email: str) -> bool:
        """Check if email exists."""
        return await self.get_by_email(email) is not None
