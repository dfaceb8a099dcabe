"""Template schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TemplateCreate(BaseModel):
    name: str | None = None
    description: str | None = None
    category: str | None = None
    project_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_public: bool = False


class TemplateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    category: str
    tags: list[str]
    project_id: str | None = None
    features: str
    design_preferences: str
    tech_requirements: str
    difficulty: str
    estimated_time: str
    is_public: bool
    is_featured: bool
    created_by: str
    usage_count: int
    created_at: datetime
    updated_at: datetime


class TemplateCustomization(BaseModel):
    features: str | None = None
    design_preferences: str | None = None
    tech_requirements: str | None = None


class TemplateUseRequest(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    customize: TemplateCustomization = Field(default_factory=TemplateCustomization)
