"""Category schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str | None = None
    description: str = ""
    color: str = Field("#6B7280", pattern=r"^#[0-9A-Fa-f]{6}$")


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")


class CategoryRead(BaseModel):
    id: str
    name: str
    description: str
    color: str
    is_system: bool
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    project_count: int | None = None
