"""Project service implementation."""

import logging
from typing import List
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFound
from ..models.project import Project
from ..models.user import User
from ..repositories.entry_repository import EntryRepository
from ..repositories.project_repository import ProjectRepository
from ..schemas.projects import ProjectCreate, ProjectMember, ProjectResponse
from .access_service import AccessService, ProjectAction
from .interfaces import IProjectService

logger = logging.getLogger(__name__)


class ProjectService(IProjectService):
    def __init__(self, session: AsyncSession):
        self.session = session
        self.project_repo = ProjectRepository(session)
        self.entry_repo = EntryRepository(session)
        self.access = AccessService(session)

    async def list_projects(self, user: User) -> List[ProjectResponse]:
        projects = await self.project_repo.list_for_member(user.id)
        return [self._project_to_response(p, user.id) for p in projects]

    async def create_project(self, user: User, request: ProjectCreate) -> ProjectResponse:
        project = await self.project_repo.create_project(
            {"name": request.name, "description": request.description, "owner_id": user.id}
        )
        await self.session.commit()
        logger.info("Project created", extra={"project_id": str(project.id), "user_id": str(user.id)})
        return await self._reload(project.id, user.id)

    async def get_project(self, user: User, project_id: UUID) -> ProjectResponse:
        project = await self.access.project_for(user, project_id, ProjectAction.READ)
        return self._project_to_response(project, user.id)

    async def delete_project(self, user: User, project_id: UUID) -> None:
        """Owner only. Entries survive as their authors' uncategorized entries."""
        project = await self.access.project_for(user, project_id, ProjectAction.DELETE)
        detached = await self.entry_repo.detach_from_projects([project.id])
        await self.project_repo.delete_project(project)
        await self.session.commit()
        logger.info(
            "Project deleted",
            extra={"project_id": str(project_id), "entries_detached": detached},
        )

    async def add_collaborator(self, user: User, project_id: UUID, email: str) -> ProjectResponse:
        """Owner only; adding someone who is already a member changes nothing."""
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFound("Project not found", project_id=str(project_id))

        candidate = await self.access.can_manage_collaborator(user, project, email)
        # ids survive the rollback below; expired ORM attributes would not
        viewer_id, candidate_id = user.id, candidate.id
        try:
            added = await self.project_repo.add_collaborator(project, candidate)
            await self.session.commit()
        except IntegrityError:
            # a concurrent request inserted the same membership first
            await self.session.rollback()
            added = False

        if added:
            logger.info(
                "Collaborator added",
                extra={"project_id": str(project_id), "collaborator_id": str(candidate_id)},
            )
        return await self._reload(project_id, viewer_id)

    async def _reload(self, project_id: UUID, viewer_id: UUID) -> ProjectResponse:
        project = await self.project_repo.get_by_id(project_id)
        return self._project_to_response(project, viewer_id)

    def _project_to_response(self, project: Project, viewer_id: UUID) -> ProjectResponse:
        return ProjectResponse(
            id=project.id,
            name=project.name,
            description=project.description,
            owner=ProjectMember.model_validate(project.owner),
            collaborators=[ProjectMember.model_validate(c) for c in project.collaborators],
            is_owner=project.owner_id == viewer_id,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )
