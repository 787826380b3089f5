"""Template schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class TemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    content: str = Field(default="")


class TemplateResponse(BaseModel):
    id: UUID
    name: str
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
