"""Security utilities."""

from .jwt import TOKEN_LIFETIME, TokenIdentity, TokenService
from .password import hash_password, unusable_password_hash, verify_password

__all__ = [
    "hash_password",
    "verify_password",
    "unusable_password_hash",
    "TokenService",
    "TokenIdentity",
    "TOKEN_LIFETIME",
]
