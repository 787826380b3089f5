"""Lab notebook entry endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.models.user import User
from ..core.schemas.common import PaginationResponse
from ..core.schemas.entries import (
    EntryCreate,
    EntryResponse,
    EntryUpdate,
    EntryVersionResponse,
)
from ..core.services import EntryService
from ..database import get_db_session
from ..middleware.auth import get_current_user

router = APIRouter(prefix="/entries", tags=["entries"])


@router.post("", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    request: EntryCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a new entry, optionally inside a project."""
    entry_service = EntryService(session)
    return await entry_service.create_entry(current_user, request)


@router.get("", response_model=PaginationResponse[EntryResponse])
async def list_entries(
    project_id: Optional[str] = Query(None, description='"all", "uncategorized" or a project id'),
    search: Optional[str] = Query(None, max_length=200),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """List entries the caller can read, newest edits first."""
    entry_service = EntryService(session)
    return await entry_service.list_entries(
        current_user, project=project_id, search=search, page=page, per_page=per_page
    )


@router.get("/{entry_id}", response_model=EntryResponse)
async def get_entry(
    entry_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    entry_service = EntryService(session)
    return await entry_service.get_entry(current_user, entry_id)


@router.put("/{entry_id}", response_model=EntryResponse)
async def update_entry(
    entry_id: UUID,
    request: EntryUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Partially update an entry; the previous state is kept as a version."""
    entry_service = EntryService(session)
    return await entry_service.update_entry(current_user, entry_id, request)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    entry_service = EntryService(session)
    await entry_service.delete_entry(current_user, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{entry_id}/versions", response_model=List[EntryVersionResponse])
async def list_versions(
    entry_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Version history, newest first."""
    entry_service = EntryService(session)
    return await entry_service.list_versions(current_user, entry_id)


@router.post("/{entry_id}/versions/{version_id}/restore", response_model=EntryResponse)
async def restore_version(
    entry_id: UUID,
    version_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Bring back an earlier version's content; the current state is versioned first."""
    entry_service = EntryService(session)
    return await entry_service.restore_version(current_user, entry_id, version_id)
