# Projects group entries and are shared with collaborators
import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .user import User


# Membership rows; the composite primary key gives set semantics
project_collaborators = Table(
    "project_collaborators",
    BaseModel.metadata,
    Column(
        "project_id", GUID(), ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True
    ),
    Column("user_id", GUID(), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Project(BaseModel):
    """Named group of entries with one owner and any number of collaborators."""

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    owner: Mapped["User"] = relationship("User", lazy="selectin")
    collaborators: Mapped[List["User"]] = relationship(
        "User",
        secondary=project_collaborators,
        lazy="selectin",
        order_by="User.username",
    )

    __table_args__ = (
        CheckConstraint("length(name) <= 255", name="ck_projects_name_len"),
        Index("idx_projects_owner_id", "owner_id"),
    )

    def __repr__(self) -> str:
        return f"<Project(name='{self.name}', owner_id={self.owner_id})>"

    @property
    def collaborator_ids(self) -> set[uuid.UUID]:
        return {user.id for user in self.collaborators}

    def is_member(self, user_id: Optional[uuid.UUID]) -> bool:
        """Owner or collaborator."""
        if user_id is None:
            return False
        return user_id == self.owner_id or user_id in self.collaborator_ids
