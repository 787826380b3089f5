"""
Domain errors raised by services, security and the auth gate.

None of these know about HTTP; ``labnote.api.errors`` maps them to
status codes at the request boundary.
"""

from typing import Any, Optional


class LabNoteError(Exception):
    """Base class for all domain errors."""

    default_message = "LabNote error"

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.default_message
        self.details = details or None
        super().__init__(self.message)


class ConfigurationError(LabNoteError):
    """Fatal misconfiguration detected at startup."""

    default_message = "Invalid configuration"


# --- authentication ---


class Unauthenticated(LabNoteError):
    default_message = "Authentication required"


class InvalidCredentials(Unauthenticated):
    default_message = "Bad credentials"


class TokenError(LabNoteError):
    """Token could not be verified."""


class TokenMalformed(TokenError):
    default_message = "Malformed token"


class TokenExpired(TokenError):
    default_message = "Token expired"


class FederationError(LabNoteError):
    """The OAuth2 provider could not be reached or returned unusable data."""

    default_message = "Federated login failed"


# --- authorization ---


class AccessDenied(LabNoteError):
    default_message = "Access denied"


class NotOwner(AccessDenied):
    default_message = "Only the project owner can do this"


class VersionMismatch(AccessDenied):
    """Restore target belongs to a different entry."""

    default_message = "Version does not belong to this entry"


# --- lookups and writes ---


class NotFound(LabNoteError):
    default_message = "Resource not found"


class VersionNotFound(NotFound):
    default_message = "Version not found"


class UnknownUser(NotFound):
    default_message = "No user with that email"


class Conflict(LabNoteError):
    """Duplicate value for a unique field."""

    default_message = "Already exists"


class ValidationFailed(LabNoteError):
    default_message = "Invalid request"


class SelfReference(ValidationFailed):
    default_message = "You cannot add yourself as a collaborator"
