# Immutable snapshots of an entry, written before each change
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel, utcnow
from .types import GUID, TagListType

if TYPE_CHECKING:
    from .user import User


class EntryVersion(BaseModel):
    """Pre-change copy of an entry's title/content/researcher/tags."""

    __tablename__ = "entry_versions"

    entry_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("entries.id", ondelete="CASCADE"), nullable=False
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    researcher: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    tags: Mapped[List[str]] = mapped_column(TagListType(), nullable=False, default=list)

    version_timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    # per-entry counter, breaks ties between equal timestamps
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)

    modified_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    modified_by: Mapped[Optional["User"]] = relationship("User", lazy="selectin")

    __table_args__ = (
        Index("idx_entry_versions_entry_id", "entry_id"),
        Index("idx_entry_versions_timestamp", "entry_id", "version_timestamp"),
    )

    def __repr__(self) -> str:
        return f"<EntryVersion(entry_id={self.entry_id}, sequence={self.sequence})>"

    def snapshot_fields(self) -> dict:
        return {
            "title": self.title,
            "content": self.content,
            "researcher": self.researcher,
            "tags": list(self.tags or []),
        }
