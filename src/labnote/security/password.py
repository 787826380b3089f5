"""Password hashing utilities."""

import secrets

from passlib.context import CryptContext

# bcrypt_sha256 pre-hashes with SHA-256, so long passwords are not truncated at 72 bytes
pwd_context = CryptContext(schemes=["bcrypt_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def unusable_password_hash() -> str:
    """Hash of a random secret nobody knows, for accounts that never log in by password."""
    return hash_password(secrets.token_urlsafe(32))
