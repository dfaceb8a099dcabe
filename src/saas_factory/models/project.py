"""Project model."""

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id


class ProjectStatus(str, Enum):
    """Project lifecycle status."""

    DRAFT = "draft"
    GENERATING = "generating"
    COMPLETED = "completed"
    DEPLOYED = "deployed"
    ERROR = "error"


# Statuses a generation run may start from
GENERATABLE_STATUSES = (ProjectStatus.DRAFT.value, ProjectStatus.ERROR.value)


class Project(Base):
    """Project model - a user's idea and everything generated from it."""

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(255), index=True)

    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    category: Mapped[str] = mapped_column(String(100), default="other", index=True)
    features: Mapped[str] = mapped_column(Text, default="")
    design_preferences: Mapped[str] = mapped_column(Text, default="")
    tech_requirements: Mapped[str] = mapped_column(Text, default="")

    status: Mapped[str] = mapped_column(
        String(50), default=ProjectStatus.DRAFT.value, index=True
    )
    generated_code: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Identifies the latest generation run; progress events carry the same id
    generation_run_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    repository_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    deployment_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deployed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, title={self.title!r}, status={self.status})>"
