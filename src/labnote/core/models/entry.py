"""
Entry model - a lab notebook note, optionally filed under a project.
"""

import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID, TagListType

if TYPE_CHECKING:
    from .project import Project
    from .user import User


# Fields captured in every version snapshot
VERSIONED_FIELDS = ("title", "content", "researcher", "tags")


class Entry(BaseModel):
    """Entry with rich-text content.

    Without a project the entry is "uncategorized" and only its author may
    touch it. With a project, access follows the project's owner and
    collaborators instead of the author.
    """

    __tablename__ = "entries"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    researcher: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    tags: Mapped[List[str]] = mapped_column(TagListType(), nullable=False, default=list)

    # reference only; storing the file itself happens elsewhere
    attached_file_path: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    project_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(), ForeignKey("projects.id", ondelete="SET NULL"), nullable=True
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    project: Mapped[Optional["Project"]] = relationship("Project", lazy="selectin")
    author: Mapped["User"] = relationship("User", lazy="selectin")

    __table_args__ = (
        CheckConstraint("length(title) <= 255", name="ck_entries_title_len"),
        Index("idx_entries_project_id", "project_id"),
        Index("idx_entries_author_id", "author_id"),
        Index("idx_entries_updated_at", "updated_at"),
    )

    def __repr__(self) -> str:
        return f"<Entry(title='{self.title}', project_id={self.project_id})>"

    @property
    def is_uncategorized(self) -> bool:
        return self.project_id is None

    def versioned_state(self) -> dict:
        """Current values of the snapshotted fields."""
        return {
            "title": self.title,
            "content": self.content,
            "researcher": self.researcher,
            "tags": list(self.tags or []),
        }
