"""
User model for authentication.
"""

from typing import Optional

from sqlalchemy import CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class User(BaseModel):
    """User account - local (username/password) or federated (OAuth2 provider).

    Projects, templates and entries point at their user; there are no
    back-references here, use the repositories to look them up.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # federated accounts carry the provider registration id (e.g. "google")
    provider: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    picture: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    __table_args__ = (
        CheckConstraint("length(username) <= 255", name="ck_users_username_len"),
        CheckConstraint("email IS NULL OR length(email) <= 255", name="ck_users_email_len"),
        Index("idx_users_username", "username"),
        Index("idx_users_email", "email"),
    )

    def __repr__(self) -> str:
        return f"<User(username='{self.username}')>"

    @property
    def is_federated(self) -> bool:
        return self.provider is not None
