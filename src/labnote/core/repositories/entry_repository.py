"""Entry repository for database operations."""

from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy import String, and_, cast, delete, desc, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.entry import Entry
from ..models.entry_version import EntryVersion
from .project_repository import ProjectRepository

UNCATEGORIZED = "uncategorized"


class EntryRepository:
    """Repository for entry database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_entry(self, entry_data: dict) -> Entry:
        """Create new entry."""
        entry = Entry(**entry_data)
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def get_by_id(self, entry_id: UUID) -> Optional[Entry]:
        """Get entry with project, collaborators and author loaded."""
        stmt = (
            select(Entry)
            .where(Entry.id == entry_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_accessible(
        self,
        user_id: UUID,
        scope: Union[None, str, UUID] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[List[Entry], int]:
        """List entries the user may read.

        ``scope`` is None for everything, ``"uncategorized"`` for the user's
        own project-less entries, or a project id. Callers check project
        membership before passing a project id.
        """
        own_uncategorized = and_(Entry.project_id.is_(None), Entry.author_id == user_id)

        if scope is None:
            member_projects = ProjectRepository(self.session).member_project_ids_query(user_id)
            condition = or_(own_uncategorized, Entry.project_id.in_(member_projects))
        elif scope == UNCATEGORIZED:
            condition = own_uncategorized
        else:
            condition = Entry.project_id == scope

        if search:
            condition = and_(
                condition,
                or_(
                    Entry.title.icontains(search, autoescape=True),
                    Entry.content.icontains(search, autoescape=True),
                    # tags are stored as JSON text or a text array; match on their text form
                    cast(Entry.tags, String).icontains(search, autoescape=True),
                ),
            )

        count_stmt = select(func.count(Entry.id)).where(condition)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(Entry)
            .where(condition)
            .order_by(desc(Entry.updated_at))
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def delete_entry(self, entry: Entry) -> None:
        """Delete an entry and its version history."""
        await self.session.execute(delete(EntryVersion).where(EntryVersion.entry_id == entry.id))
        await self.session.delete(entry)
        await self.session.flush()

    async def delete_by_author(self, author_id: UUID) -> int:
        """Delete every entry written by the user, with their versions."""
        authored = select(Entry.id).where(Entry.author_id == author_id)
        await self.session.execute(
            delete(EntryVersion).where(EntryVersion.entry_id.in_(authored))
        )
        result = await self.session.execute(
            delete(Entry)
            .where(Entry.author_id == author_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def detach_from_projects(self, project_ids: List[UUID]) -> int:
        """Move entries of the given projects to their authors' uncategorized space."""
        if not project_ids:
            return 0
        result = await self.session.execute(
            update(Entry)
            .where(Entry.project_id.in_(project_ids))
            .values(project_id=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
