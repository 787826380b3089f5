"""Access evaluation for entries and projects.

The rules are fixed:

* an entry inside a project is open to the project's owner and
  collaborators, whoever wrote it;
* an uncategorized entry is open to its author only;
* reading a project needs membership, deleting it or adding people needs
  ownership.

``can_access_entry`` and ``can_access_project`` are pure and work on
already-loaded rows. ``AccessService`` does the lookups and turns a "no"
into a typed error.
"""

import logging
from enum import Enum
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import AccessDenied, NotFound, NotOwner, SelfReference, UnknownUser
from ..models.entry import Entry
from ..models.project import Project
from ..models.user import User
from ..repositories.entry_repository import EntryRepository
from ..repositories.project_repository import ProjectRepository
from ..repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class EntryAction(str, Enum):
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    EXPORT = "export"
    LIST_VERSIONS = "list_versions"
    RESTORE_VERSION = "restore_version"


class ProjectAction(str, Enum):
    READ = "read"
    LIST = "list"
    # file an entry under the project
    CONTRIBUTE = "contribute"
    DELETE = "delete"
    ADD_COLLABORATOR = "add_collaborator"


OWNER_ONLY_ACTIONS = frozenset({ProjectAction.DELETE, ProjectAction.ADD_COLLABORATOR})


def can_access_entry(subject_id: Optional[UUID], entry: Entry, action: EntryAction) -> bool:
    """Same answer for every entry action; ``action`` is kept for logging and callers."""
    if subject_id is None:
        return False
    if entry.project_id is not None:
        # a dangling project reference never falls back to the author
        if entry.project is None:
            return False
        return entry.project.is_member(subject_id)
    return entry.author_id is not None and entry.author_id == subject_id


def can_access_project(subject_id: Optional[UUID], project: Project, action: ProjectAction) -> bool:
    if subject_id is None:
        return False
    if action in OWNER_ONLY_ACTIONS:
        return subject_id == project.owner_id
    return project.is_member(subject_id)


class AccessService:
    """Loads entries/projects for a subject and enforces the rules above."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.entry_repo = EntryRepository(session)
        self.project_repo = ProjectRepository(session)
        self.user_repo = UserRepository(session)

    async def entry_for(self, subject: User, entry_id: UUID, action: EntryAction) -> Entry:
        """Return the entry if ``subject`` may perform ``action`` on it."""
        entry = await self.entry_repo.get_by_id(entry_id)
        if entry is None:
            raise NotFound("Entry not found", entry_id=str(entry_id))
        if not can_access_entry(subject.id, entry, action):
            logger.info(
                "Entry access denied",
                extra={"user_id": str(subject.id), "entry_id": str(entry_id), "action": action.value},
            )
            raise AccessDenied("Entry not accessible", entry_id=str(entry_id))
        return entry

    async def project_for(
        self, subject: User, project_id: UUID, action: ProjectAction
    ) -> Project:
        """Return the project if ``subject`` may perform ``action`` on it."""
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFound("Project not found", project_id=str(project_id))
        if not can_access_project(subject.id, project, action):
            logger.info(
                "Project access denied",
                extra={
                    "user_id": str(subject.id),
                    "project_id": str(project_id),
                    "action": action.value,
                },
            )
            if action in OWNER_ONLY_ACTIONS:
                raise NotOwner(project_id=str(project_id))
            raise AccessDenied("Project not accessible", project_id=str(project_id))
        return project

    async def can_manage_collaborator(
        self, requester: User, project: Project, candidate_email: str
    ) -> User:
        """Validate adding ``candidate_email`` to ``project`` and return that user.

        Raises NotOwner, UnknownUser or SelfReference, checked in that order.
        """
        if not can_access_project(requester.id, project, ProjectAction.ADD_COLLABORATOR):
            raise NotOwner(project_id=str(project.id))

        candidate = await self.user_repo.get_by_email(candidate_email)
        if candidate is None:
            raise UnknownUser(email=candidate_email)
        if candidate.id == requester.id:
            raise SelfReference()
        return candidate
