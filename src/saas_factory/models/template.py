"""Project template model."""

from sqlalchemy import JSON, Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id


class ProjectTemplate(Base):
    """Reusable project blueprint created from an existing project."""

    __tablename__ = "project_templates"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    category: Mapped[str] = mapped_column(String(100), default="other")
    tags: Mapped[list] = mapped_column(JSON, default=list)
    project_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    features: Mapped[str] = mapped_column(Text, default="")
    design_preferences: Mapped[str] = mapped_column(Text, default="")
    tech_requirements: Mapped[str] = mapped_column(Text, default="")

    difficulty: Mapped[str] = mapped_column(String(50), default="intermediate")
    estimated_time: Mapped[str] = mapped_column(String(50), default="3-5 hours")
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    created_by: Mapped[str] = mapped_column(String(255), index=True)
    usage_count: Mapped[int] = mapped_column(Integer, default=0)
