"""Repository layer for data access."""

from .entry_repository import UNCATEGORIZED, EntryRepository
from .entry_version_repository import EntryVersionRepository
from .project_repository import ProjectRepository
from .template_repository import TemplateRepository
from .user_repository import UserRepository

__all__ = [
    "UserRepository",
    "ProjectRepository",
    "EntryRepository",
    "EntryVersionRepository",
    "TemplateRepository",
    "UNCATEGORIZED",
]
