"""Project and collaborator schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)


class CollaboratorRequest(BaseModel):
    """Add a collaborator by email."""

    email: EmailStr

    model_config = ConfigDict(json_schema_extra={"example": {"email": "pierre@example.org"}})


class ProjectMember(BaseModel):
    id: UUID
    username: str
    email: Optional[str] = None
    picture: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProjectResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    owner: ProjectMember
    collaborators: List[ProjectMember] = Field(default_factory=list)
    is_owner: bool = Field(description="Whether the caller owns the project")
    created_at: datetime
    updated_at: datetime
