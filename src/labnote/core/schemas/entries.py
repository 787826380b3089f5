"""Entry and entry-version schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.types import normalize_tags


class EntryCreate(BaseModel):
    """Create entry request."""

    title: str = Field(min_length=1, max_length=255)
    content: str = Field(default="")
    researcher: Optional[str] = Field(default=None, max_length=255)
    tags: List[str] = Field(default_factory=list, max_length=50)
    attached_file_path: Optional[str] = Field(default=None, max_length=1000)
    project_id: Optional[UUID] = Field(default=None, description="Omit for uncategorized")

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: List[str]) -> List[str]:
        return normalize_tags(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "PCR run 14",
                "content": "<p>Annealing at 58C</p>",
                "researcher": "M. Curie",
                "tags": ["pcr", "batch-3"],
            }
        }
    )


class EntryUpdate(BaseModel):
    """Partial update. Omitted fields stay as they are.

    Sending ``"project_id": null`` moves the entry to uncategorized;
    leaving ``project_id`` out keeps the current project.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = None
    researcher: Optional[str] = Field(default=None, max_length=255)
    tags: Optional[List[str]] = Field(default=None, max_length=50)
    attached_file_path: Optional[str] = Field(default=None, max_length=1000)
    project_id: Optional[UUID] = None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return None if v is None else normalize_tags(v)

    @property
    def moves_project(self) -> bool:
        return "project_id" in self.model_fields_set


class EntryResponse(BaseModel):
    id: UUID
    title: str
    content: str
    researcher: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    attached_file_path: Optional[str] = None
    project_id: Optional[UUID] = None
    project_name: Optional[str] = None
    author_id: UUID
    author_username: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EntryVersionResponse(BaseModel):
    """One snapshot in an entry's history."""

    id: UUID
    entry_id: UUID
    title: str
    content: str
    researcher: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    version_timestamp: datetime
    modified_by_id: Optional[UUID] = None
    modified_by_username: Optional[str] = None
