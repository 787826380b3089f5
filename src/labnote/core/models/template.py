# Reusable content snippets, private to their owner
import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel
from .types import GUID


class Template(BaseModel):
    """Content template owned by a single user."""

    __tablename__ = "templates"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        CheckConstraint("length(name) <= 255", name="ck_templates_name_len"),
        Index("idx_templates_owner_id", "owner_id"),
    )

    def __repr__(self) -> str:
        return f"<Template(name='{self.name}')>"
