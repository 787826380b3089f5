"""Entry version repository - append-only history."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.entry_version import EntryVersion


class EntryVersionRepository:
    """Versions are only ever inserted; there is no update or single delete."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_version(self, version_data: dict) -> EntryVersion:
        version = EntryVersion(**version_data)
        self.session.add(version)
        await self.session.flush()
        return version

    async def next_sequence(self, entry_id: UUID) -> int:
        stmt = select(func.max(EntryVersion.sequence)).where(EntryVersion.entry_id == entry_id)
        current = (await self.session.execute(stmt)).scalar_one_or_none()
        return (current or 0) + 1

    async def get_by_id(self, version_id: UUID) -> Optional[EntryVersion]:
        stmt = select(EntryVersion).where(EntryVersion.id == version_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_entry(self, entry_id: UUID) -> List[EntryVersion]:
        """Newest first."""
        stmt = (
            select(EntryVersion)
            .where(EntryVersion.entry_id == entry_id)
            .order_by(desc(EntryVersion.version_timestamp), desc(EntryVersion.sequence))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def clear_modified_by(self, user_id: UUID) -> int:
        """Forget a deleted user as the author of snapshots they triggered."""
        result = await self.session.execute(
            update(EntryVersion)
            .where(EntryVersion.modified_by_id == user_id)
            .values(modified_by_id=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
