"""
Authentication and account schemas.

These schemas define the API contracts for registration, login,
token issuance and the current user's profile.
"""

import re
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_.\-]+$")


def _check_username(value: str) -> str:
    if not _USERNAME_RE.match(value):
        raise ValueError(
            "Username can only contain letters, numbers, dots, hyphens, and underscores"
        )
    return value


class LoginRequest(BaseModel):
    """User login request schema."""

    username: str = Field(min_length=1, max_length=255, description="Username")
    password: str = Field(min_length=1, max_length=128, description="User password")

    model_config = ConfigDict(
        json_schema_extra={"example": {"username": "marie", "password": "radium-1898"}}
    )


class RegisterRequest(BaseModel):
    """User registration request schema."""

    username: str = Field(min_length=3, max_length=50, description="Unique username")
    email: EmailStr = Field(description="Unique email address")
    password: str = Field(min_length=8, max_length=128, description="User password")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _check_username(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "marie",
                "email": "marie@example.org",
                "password": "radium-1898",
            }
        }
    )


class UserResponse(BaseModel):
    """User information response schema."""

    id: uuid.UUID = Field(description="User unique identifier")
    username: str = Field(description="Username")
    email: Optional[str] = Field(default=None, description="Email address")
    provider: Optional[str] = Field(default=None, description="Federated login provider")
    picture: Optional[str] = Field(default=None, description="Avatar URL")
    created_at: datetime = Field(description="Account creation timestamp")

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """Access token response schema."""

    access_token: str = Field(description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(description="Token lifetime in seconds")
    user: UserResponse = Field(description="User information")


class UsernameAvailability(BaseModel):
    available: bool


class UserUpdateRequest(BaseModel):
    """Profile update - currently only the handle can change."""

    username: str = Field(min_length=3, max_length=50, description="New username")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _check_username(v)
