"""Entry template endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.models.user import User
from ..core.schemas.templates import TemplateCreate, TemplateResponse
from ..core.services import TemplateService
from ..database import get_db_session
from ..middleware.auth import get_current_user

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=List[TemplateResponse])
async def list_templates(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    template_service = TemplateService(session)
    return await template_service.list_templates(current_user)


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    request: TemplateCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    template_service = TemplateService(session)
    return await template_service.create_template(current_user, request)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    template_service = TemplateService(session)
    await template_service.delete_template(current_user, template_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
