"""
Pydantic schemas for validating and documenting API requests and responses.

Input/output contracts for authentication, entries and their versions,
projects, templates and the common pagination/error formats.
"""

from .auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UsernameAvailability,
    UserResponse,
    UserUpdateRequest,
)
from .common import ErrorResponse, HealthCheckResponse, PaginationResponse
from .entries import (
    EntryCreate,
    EntryResponse,
    EntryUpdate,
    EntryVersionResponse,
)
from .projects import CollaboratorRequest, ProjectCreate, ProjectMember, ProjectResponse
from .templates import TemplateCreate, TemplateResponse

__all__ = [
    # Auth schemas
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserResponse",
    "UserUpdateRequest",
    "UsernameAvailability",
    # Entry schemas
    "EntryCreate",
    "EntryUpdate",
    "EntryResponse",
    "EntryVersionResponse",
    # Project schemas
    "ProjectCreate",
    "ProjectResponse",
    "ProjectMember",
    "CollaboratorRequest",
    # Template schemas
    "TemplateCreate",
    "TemplateResponse",
    # Common schemas
    "PaginationResponse",
    "ErrorResponse",
    "HealthCheckResponse",
]
