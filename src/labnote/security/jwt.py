"""JWT token issuing and verification."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional
from uuid import UUID

from jose import JWTError, jwt

from ..config import Settings
from ..core.errors import ConfigurationError, TokenExpired, TokenMalformed

# Tokens are stateless and cannot be revoked, so their lifetime is fixed.
TOKEN_LIFETIME = timedelta(hours=24)

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")
MIN_SECRET_BYTES = 32
PLACEHOLDER_SECRET = "your-secret-key-change-in-production"

# Display-only claims copied into the token when present
DISPLAY_CLAIMS = ("username", "email", "picture", "provider")


Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenIdentity:
    """What a verified token says about its bearer.

    Only ``user_id`` is authoritative; ``claims`` hold display hints.
    """

    user_id: UUID
    expires_at: datetime
    claims: Dict[str, Any] = field(default_factory=dict)


class TokenService:
    """Issues and verifies signed, stateless access tokens."""

    def __init__(self, secret_key: str, algorithm: str = "HS512", clock: Optional[Clock] = None):
        if not secret_key:
            raise ConfigurationError("secret_key must be set")
        if len(secret_key.encode()) < MIN_SECRET_BYTES:
            raise ConfigurationError(
                f"secret_key must be at least {MIN_SECRET_BYTES} bytes"
            )
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ConfigurationError(f"Unsupported JWT algorithm: {algorithm}")

        self._secret_key = secret_key
        self._algorithm = algorithm
        self._clock = clock or _utcnow

    @classmethod
    def from_settings(cls, settings: Settings, clock: Optional[Clock] = None) -> "TokenService":
        """Build the service from settings, refusing the placeholder secret in production."""
        if settings.environment == "production" and settings.secret_key == PLACEHOLDER_SECRET:
            raise ConfigurationError("secret_key is still the development placeholder")
        return cls(settings.secret_key, settings.algorithm, clock=clock)

    @property
    def lifetime_seconds(self) -> int:
        return int(TOKEN_LIFETIME.total_seconds())

    def issue(self, user, claims: Optional[Dict[str, Any]] = None) -> str:
        """Create a token for ``user`` expiring 24 hours from now.

        ``claims`` may add or override display claims; the subject, expiry
        and issue time are always set here.
        """
        now = self._clock()
        payload: Dict[str, Any] = {}
        for name in DISPLAY_CLAIMS:
            value = getattr(user, name, None)
            if value is not None:
                payload[name] = value
        if claims:
            payload.update({k: v for k, v in claims.items() if k in DISPLAY_CLAIMS})

        payload.update(
            {
                "sub": str(user.id),
                "iat": int(now.timestamp()),
                "exp": int((now + TOKEN_LIFETIME).timestamp()),
            }
        )
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenIdentity:
        """Check signature and expiry.

        Raises TokenMalformed for bad signatures or structure, TokenExpired
        once the clock reaches ``exp``.
        """
        try:
            # expiry is checked against our own clock below
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError as exc:
            raise TokenMalformed(str(exc)) from exc

        try:
            user_id = UUID(payload["sub"])
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError) as exc:
            raise TokenMalformed("Token is missing required claims") from exc

        if self._clock() >= expires_at:
            raise TokenExpired(expired_at=expires_at.isoformat())

        claims = {k: payload[k] for k in DISPLAY_CLAIMS if k in payload}
        return TokenIdentity(user_id=user_id, expires_at=expires_at, claims=claims)
