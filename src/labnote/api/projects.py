"""Project and collaborator endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.models.user import User
from ..core.schemas.projects import CollaboratorRequest, ProjectCreate, ProjectResponse
from ..core.services import ProjectService
from ..database import get_db_session
from ..middleware.auth import get_current_user

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Projects the caller owns or collaborates on."""
    project_service = ProjectService(session)
    return await project_service.list_projects(current_user)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    request: ProjectCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    project_service = ProjectService(session)
    return await project_service.create_project(current_user, request)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    project_service = ProjectService(session)
    return await project_service.get_project(current_user, project_id)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Delete a project; its entries become their authors' uncategorized entries."""
    project_service = ProjectService(session)
    await project_service.delete_project(current_user, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{project_id}/collaborators", response_model=ProjectResponse)
async def add_collaborator(
    project_id: UUID,
    request: CollaboratorRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Add a registered user, by email, as collaborator."""
    project_service = ProjectService(session)
    return await project_service.add_collaborator(current_user, project_id, request.email)
