"""
Service interfaces for LabNote.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from ..models.user import User
from ..schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdateRequest,
)
from ..schemas.common import HealthCheckResponse, PaginationResponse
from ..schemas.entries import EntryCreate, EntryResponse, EntryUpdate, EntryVersionResponse
from ..schemas.projects import ProjectCreate, ProjectResponse
from ..schemas.templates import TemplateCreate, TemplateResponse


class IAuthService(ABC):
    """Auth service for user management."""

    @abstractmethod
    async def register_user(self, request: RegisterRequest) -> TokenResponse:
        """Register new user."""

    @abstractmethod
    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        """Login user and return a JWT."""

    @abstractmethod
    async def is_username_available(self, username: str) -> bool:
        """Check whether a handle is free."""

    @abstractmethod
    async def get_current_user(self, user: User) -> UserResponse:
        """Profile of the signed-in user."""

    @abstractmethod
    async def update_username(self, user: User, request: UserUpdateRequest) -> TokenResponse:
        """Rename the signed-in user."""

    @abstractmethod
    async def delete_account(self, user: User) -> None:
        """Delete the signed-in user and their data."""


class IEntryService(ABC):
    """Entry CRUD and history."""

    @abstractmethod
    async def create_entry(self, user: User, request: EntryCreate) -> EntryResponse:
        """Create new entry."""

    @abstractmethod
    async def list_entries(
        self,
        user: User,
        project: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 20,
    ) -> PaginationResponse[EntryResponse]:
        """List entries visible to the user."""

    @abstractmethod
    async def get_entry(self, user: User, entry_id: UUID) -> EntryResponse:
        """Get entry by ID."""

    @abstractmethod
    async def update_entry(self, user: User, entry_id: UUID, request: EntryUpdate) -> EntryResponse:
        """Update entry, keeping the previous content as a version."""

    @abstractmethod
    async def delete_entry(self, user: User, entry_id: UUID) -> None:
        """Delete entry and its history."""

    @abstractmethod
    async def list_versions(self, user: User, entry_id: UUID) -> List[EntryVersionResponse]:
        """Entry history, newest first."""

    @abstractmethod
    async def restore_version(self, user: User, entry_id: UUID, version_id: UUID) -> EntryResponse:
        """Bring back an earlier version."""


class IProjectService(ABC):
    """Projects and collaborators."""

    @abstractmethod
    async def list_projects(self, user: User) -> List[ProjectResponse]:
        """Owned and shared projects."""

    @abstractmethod
    async def create_project(self, user: User, request: ProjectCreate) -> ProjectResponse:
        """Create project owned by the user."""

    @abstractmethod
    async def get_project(self, user: User, project_id: UUID) -> ProjectResponse:
        """Get project by ID."""

    @abstractmethod
    async def delete_project(self, user: User, project_id: UUID) -> None:
        """Delete project, keeping its entries as uncategorized."""

    @abstractmethod
    async def add_collaborator(self, user: User, project_id: UUID, email: str) -> ProjectResponse:
        """Share project with another user."""


class ITemplateService(ABC):
    """Per-user templates."""

    @abstractmethod
    async def list_templates(self, user: User) -> List[TemplateResponse]:
        """List the user's templates."""

    @abstractmethod
    async def create_template(self, user: User, request: TemplateCreate) -> TemplateResponse:
        """Create template."""

    @abstractmethod
    async def delete_template(self, user: User, template_id: UUID) -> None:
        """Delete template."""


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""

    @abstractmethod
    async def check_database_health(self) -> dict:
        """Check DB connection."""

    @abstractmethod
    async def check_redis_health(self) -> dict:
        """Check Redis connection."""
