"""Template service implementation."""

from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import AccessDenied, NotFound
from ..models.user import User
from ..repositories.template_repository import TemplateRepository
from ..schemas.templates import TemplateCreate, TemplateResponse
from .interfaces import ITemplateService


class TemplateService(ITemplateService):
    """Templates are private; only the owner ever sees one."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.template_repo = TemplateRepository(session)

    async def list_templates(self, user: User) -> List[TemplateResponse]:
        templates = await self.template_repo.list_for_owner(user.id)
        return [TemplateResponse.model_validate(t) for t in templates]

    async def create_template(self, user: User, request: TemplateCreate) -> TemplateResponse:
        template = await self.template_repo.create_template(
            {"name": request.name, "content": request.content, "owner_id": user.id}
        )
        await self.session.commit()
        return TemplateResponse.model_validate(template)

    async def delete_template(self, user: User, template_id: UUID) -> None:
        template = await self.template_repo.get_by_id(template_id)
        if template is None:
            raise NotFound("Template not found", template_id=str(template_id))
        if template.owner_id != user.id:
            raise AccessDenied("Template not accessible", template_id=str(template_id))
        await self.template_repo.delete_template(template)
        await self.session.commit()
