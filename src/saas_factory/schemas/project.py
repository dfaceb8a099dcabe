"""Project schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProjectFields(BaseModel):
    """Requirement fields a user may supply or change."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = None
    features: str | None = None
    design_preferences: str | None = None
    tech_requirements: str | None = None


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    category: str = "other"
    features: str = ""
    design_preferences: str = ""
    tech_requirements: str = ""


class ProjectUpdate(ProjectFields):
    """Schema for a partial project update."""

    pass


class ProjectRead(BaseModel):
    """Schema for reading a project."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    description: str
    category: str
    features: str
    design_preferences: str
    tech_requirements: str
    status: str
    generated_code: dict[str, Any] | None = None
    error_message: str | None = None
    repository_url: str | None = None
    deployment_url: str | None = None
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None
    deployed_at: datetime | None = None


class GenerationLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: str
    step: str
    status: str
    message: str
    details: dict[str, Any] | None = None
    started_at: datetime
    completed_at: datetime | None = None


class ProjectDetail(ProjectRead):
    generation_logs: list[GenerationLogRead] = []


class ProjectPage(BaseModel):
    projects: list[ProjectRead]
    total: int
    page: int
    per_page: int


class GenerateRequest(BaseModel):
    project_id: str = Field(..., min_length=1)
    project_data: ProjectFields | None = None


class GenerationStatus(BaseModel):
    project_id: str
    project_status: str
    generated_code: dict[str, Any] | None = None
    error_message: str | None = None
    generation_logs: list[GenerationLogRead] = []


class CloneSettings(BaseModel):
    include_generated_code: bool = True
    include_deployment_settings: bool = False


class CloneRequest(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = None
    clone_settings: CloneSettings = Field(default_factory=CloneSettings)


class FavoriteStatus(BaseModel):
    project_id: str
    is_favorite: bool
