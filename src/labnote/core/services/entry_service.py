"""Entry service implementation."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import ValidationFailed
from ..models.entry import Entry
from ..models.entry_version import EntryVersion
from ..models.user import User
from ..repositories.entry_repository import UNCATEGORIZED, EntryRepository
from ..schemas.common import PaginationResponse
from ..schemas.entries import EntryCreate, EntryResponse, EntryUpdate, EntryVersionResponse
from .access_service import AccessService, EntryAction, ProjectAction
from .interfaces import IEntryService
from .versioning_service import VersioningService

logger = logging.getLogger(__name__)

ALL_PROJECTS = "all"


class EntryService(IEntryService):
    """Entry CRUD; every write goes through the access check, content writes through history."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.entry_repo = EntryRepository(session)
        self.access = AccessService(session)
        self.versioning = VersioningService(session)

    async def create_entry(self, user: User, request: EntryCreate) -> EntryResponse:
        """Create new entry, optionally inside a project the user belongs to."""
        entry_data = request.model_dump(exclude={"project_id"})
        entry_data["author_id"] = user.id
        if request.project_id is not None:
            project = await self.access.project_for(
                user, request.project_id, ProjectAction.CONTRIBUTE
            )
            entry_data["project_id"] = project.id

        entry = await self.entry_repo.create_entry(entry_data)
        await self.session.commit()

        logger.info(
            "Entry created",
            extra={"entry_id": str(entry.id), "user_id": str(user.id)},
        )
        return await self._reload(entry.id)

    async def list_entries(
        self,
        user: User,
        project: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 20,
    ) -> PaginationResponse[EntryResponse]:
        """``project`` is "all" (default), "uncategorized" or a project id."""
        scope = await self._resolve_scope(user, project)
        entries, total = await self.entry_repo.list_accessible(
            user.id, scope=scope, search=search or None, page=page, per_page=per_page
        )
        return PaginationResponse[EntryResponse].create(
            items=[self._entry_to_response(e) for e in entries],
            total=total,
            page=page,
            per_page=per_page,
        )

    async def get_entry(self, user: User, entry_id: UUID) -> EntryResponse:
        entry = await self.access.entry_for(user, entry_id, EntryAction.READ)
        return self._entry_to_response(entry)

    async def update_entry(self, user: User, entry_id: UUID, request: EntryUpdate) -> EntryResponse:
        """Snapshot the current content, then apply the changes, in one commit."""
        entry = await self.access.entry_for(user, entry_id, EntryAction.UPDATE)

        # resolve the target project before touching anything
        target_project = entry.project
        if request.moves_project and request.project_id != entry.project_id:
            target_project = None
            if request.project_id is not None:
                target_project = await self.access.project_for(
                    user, request.project_id, ProjectAction.CONTRIBUTE
                )

        changes = {
            key: value
            for key, value in request.model_dump(exclude_unset=True, exclude={"project_id"}).items()
            # title/content/tags cannot be cleared to null
            if value is not None or key in ("researcher", "attached_file_path")
        }

        await self.versioning.record_snapshot(entry, user)
        self.versioning.apply_update(entry, changes)
        entry.project = target_project
        await self.session.commit()

        logger.info("Entry updated", extra={"entry_id": str(entry.id), "user_id": str(user.id)})
        return await self._reload(entry.id)

    async def delete_entry(self, user: User, entry_id: UUID) -> None:
        entry = await self.access.entry_for(user, entry_id, EntryAction.DELETE)
        await self.entry_repo.delete_entry(entry)
        await self.session.commit()
        logger.info("Entry deleted", extra={"entry_id": str(entry_id), "user_id": str(user.id)})

    async def list_versions(self, user: User, entry_id: UUID) -> List[EntryVersionResponse]:
        entry = await self.access.entry_for(user, entry_id, EntryAction.LIST_VERSIONS)
        versions = await self.versioning.list_versions(entry)
        return [self._version_to_response(v) for v in versions]

    async def restore_version(self, user: User, entry_id: UUID, version_id: UUID) -> EntryResponse:
        entry = await self.access.entry_for(user, entry_id, EntryAction.RESTORE_VERSION)
        await self.versioning.restore(entry, version_id, user)
        await self.session.commit()
        return await self._reload(entry.id)

    async def _resolve_scope(self, user: User, project: Optional[str]):
        if project is None or project == ALL_PROJECTS:
            return None
        if project == UNCATEGORIZED:
            return UNCATEGORIZED
        try:
            project_id = UUID(project)
        except ValueError as exc:
            raise ValidationFailed(
                "project must be 'all', 'uncategorized' or a project id", project=project
            ) from exc
        await self.access.project_for(user, project_id, ProjectAction.LIST)
        return project_id

    async def _reload(self, entry_id: UUID) -> EntryResponse:
        entry = await self.entry_repo.get_by_id(entry_id)
        return self._entry_to_response(entry)

    def _entry_to_response(self, entry: Entry) -> EntryResponse:
        return EntryResponse(
            id=entry.id,
            title=entry.title,
            content=entry.content,
            researcher=entry.researcher,
            tags=list(entry.tags or []),
            attached_file_path=entry.attached_file_path,
            project_id=entry.project_id,
            project_name=entry.project.name if entry.project else None,
            author_id=entry.author_id,
            author_username=entry.author.username if entry.author else None,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )

    def _version_to_response(self, version: EntryVersion) -> EntryVersionResponse:
        return EntryVersionResponse(
            id=version.id,
            entry_id=version.entry_id,
            title=version.title,
            content=version.content,
            researcher=version.researcher,
            tags=list(version.tags or []),
            version_timestamp=version.version_timestamp,
            modified_by_id=version.modified_by_id,
            modified_by_username=version.modified_by.username if version.modified_by else None,
        )
