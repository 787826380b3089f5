"""
Service layer interfaces and implementations.
"""

from .access_service import (
    AccessService,
    EntryAction,
    ProjectAction,
    can_access_entry,
    can_access_project,
)
from .auth_service import AuthService
from .entry_service import EntryService
from .health_service import HealthService
from .identity_service import IdentityService
from .interfaces import (
    IAuthService,
    IEntryService,
    IHealthService,
    IProjectService,
    ITemplateService,
)
from .project_service import ProjectService
from .template_service import TemplateService
from .versioning_service import VersioningService

__all__ = [
    # Interfaces
    "IAuthService",
    "IEntryService",
    "IProjectService",
    "ITemplateService",
    "IHealthService",

    # Implementations
    "AuthService",
    "IdentityService",
    "AccessService",
    "VersioningService",
    "EntryService",
    "ProjectService",
    "TemplateService",
    "HealthService",

    # Access rules
    "EntryAction",
    "ProjectAction",
    "can_access_entry",
    "can_access_project",
]
