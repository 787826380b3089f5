"""Middleware for authentication and other cross-cutting concerns."""

from .auth import (
    PrincipalGate,
    authenticate,
    get_current_user,
    get_token_service,
)

__all__ = [
    "PrincipalGate",
    "authenticate",
    "get_current_user",
    "get_token_service",
]
