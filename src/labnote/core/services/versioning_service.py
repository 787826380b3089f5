"""Entry history: snapshot before every change, list, restore.

Nothing here commits. Callers snapshot, apply the change and commit once,
so a snapshot and the change it precedes land together or not at all.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import VersionMismatch, VersionNotFound
from ..models.base import utcnow
from ..models.entry import VERSIONED_FIELDS, Entry
from ..models.entry_version import EntryVersion
from ..models.user import User
from ..repositories.entry_version_repository import EntryVersionRepository

logger = logging.getLogger(__name__)

# Entry attributes a content update may overwrite
MUTABLE_FIELDS = VERSIONED_FIELDS + ("attached_file_path",)


class VersioningService:
    def __init__(self, session: AsyncSession, clock: Optional[Callable[[], datetime]] = None):
        self.session = session
        self.version_repo = EntryVersionRepository(session)
        self.clock = clock or utcnow

    async def record_snapshot(self, entry: Entry, actor: Optional[User]) -> EntryVersion:
        """Append the entry's current (pre-change) state to its history."""
        sequence = await self.version_repo.next_sequence(entry.id)
        version = await self.version_repo.add_version(
            {
                "entry_id": entry.id,
                **entry.versioned_state(),
                "version_timestamp": self.clock(),
                "sequence": sequence,
                "modified_by_id": actor.id if actor is not None else None,
            }
        )
        logger.debug(
            "Recorded entry snapshot",
            extra={"entry_id": str(entry.id), "sequence": sequence},
        )
        return version

    def apply_update(self, entry: Entry, new_fields: dict) -> Entry:
        """Overwrite the entry's mutable fields. Unknown keys are ignored."""
        for key, value in new_fields.items():
            if key in MUTABLE_FIELDS:
                setattr(entry, key, list(value) if key == "tags" else value)
        return entry

    async def list_versions(self, entry: Entry) -> List[EntryVersion]:
        """Newest first."""
        return await self.version_repo.list_for_entry(entry.id)

    async def restore(self, entry: Entry, version_id: UUID, actor: Optional[User]) -> Entry:
        """Copy an earlier version back into the entry, snapshotting the state it replaces."""
        version = await self.version_repo.get_by_id(version_id)
        if version is None:
            raise VersionNotFound(version_id=str(version_id))
        if version.entry_id != entry.id:
            logger.warning(
                "Restore attempted with a version of another entry",
                extra={
                    "entry_id": str(entry.id),
                    "version_id": str(version_id),
                    "user_id": str(actor.id) if actor else None,
                },
            )
            raise VersionMismatch(version_id=str(version_id))

        await self.record_snapshot(entry, actor)
        self.apply_update(entry, version.snapshot_fields())
        await self.session.flush()

        logger.info(
            "Entry restored",
            extra={"entry_id": str(entry.id), "version_id": str(version_id)},
        )
        return entry
