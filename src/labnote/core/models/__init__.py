"""
Database models for LabNote.

SQLAlchemy ORM models defining the schema. Relationships only point one
way (entry -> project/author, project -> owner/collaborators); reverse
lookups go through the repositories.

Models included:
    - User: local or federated account
    - Project: owned grouping of entries, shared with collaborators
    - Entry: note content, uncategorized or inside a project
    - EntryVersion: immutable pre-change snapshot of an entry
    - Template: reusable content owned by one user
"""

from .base import BaseModel
from .entry import Entry
from .entry_version import EntryVersion
from .project import Project, project_collaborators
from .template import Template
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Project",
    "project_collaborators",
    "Entry",
    "EntryVersion",
    "Template",
]
