"""Template repository for database operations."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.template import Template


class TemplateRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_template(self, template_data: dict) -> Template:
        template = Template(**template_data)
        self.session.add(template)
        await self.session.flush()
        return template

    async def get_by_id(self, template_id: UUID) -> Optional[Template]:
        stmt = select(Template).where(Template.id == template_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_owner(self, owner_id: UUID) -> List[Template]:
        stmt = select(Template).where(Template.owner_id == owner_id).order_by(Template.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_template(self, template: Template) -> None:
        await self.session.delete(template)
        await self.session.flush()

    async def delete_by_owner(self, owner_id: UUID) -> int:
        result = await self.session.execute(
            delete(Template)
            .where(Template.owner_id == owner_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
