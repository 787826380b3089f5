"""Project repository for database operations."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.project import Project, project_collaborators
from ..models.user import User


class ProjectRepository:
    """Repository for projects and their collaborator memberships."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_project(self, project_data: dict) -> Project:
        """Create new project."""
        project = Project(**project_data)
        self.session.add(project)
        await self.session.flush()
        return project

    async def get_by_id(self, project_id: UUID) -> Optional[Project]:
        """Get project with owner and collaborators loaded."""
        stmt = (
            select(Project)
            .where(Project.id == project_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    def _member_project_ids(self, user_id: UUID):
        return select(project_collaborators.c.project_id).where(
            project_collaborators.c.user_id == user_id
        )

    def member_project_ids_query(self, user_id: UUID):
        """Subquery of ids of projects the user owns or collaborates on."""
        return select(Project.id).where(
            or_(Project.owner_id == user_id, Project.id.in_(self._member_project_ids(user_id)))
        )

    async def list_for_member(self, user_id: UUID) -> List[Project]:
        """Projects owned by or shared with the user."""
        stmt = (
            select(Project)
            .where(Project.id.in_(self.member_project_ids_query(user_id)))
            .order_by(Project.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_owned_ids(self, owner_id: UUID) -> List[UUID]:
        result = await self.session.execute(select(Project.id).where(Project.owner_id == owner_id))
        return list(result.scalars().all())

    async def add_collaborator(self, project: Project, user: User) -> bool:
        """Add a member; returns False when the user was already one."""
        if user.id in project.collaborator_ids:
            return False
        project.collaborators.append(user)
        await self.session.flush()
        return True

    async def delete_project(self, project: Project) -> None:
        """Delete project; the ORM removes its membership rows."""
        await self.session.delete(project)
        await self.session.flush()

    async def delete_owned(self, owner_id: UUID) -> int:
        """Delete every project the user owns. Returns the number removed."""
        owned = select(Project.id).where(Project.owner_id == owner_id)
        await self.session.execute(
            delete(project_collaborators).where(project_collaborators.c.project_id.in_(owned))
        )
        result = await self.session.execute(
            delete(Project)
            .where(Project.owner_id == owner_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def remove_memberships(self, user_id: UUID) -> int:
        """Drop the user from every project they collaborate on."""
        result = await self.session.execute(
            delete(project_collaborators).where(project_collaborators.c.user_id == user_id)
        )
        return result.rowcount
