"""Project collaborator model."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow


class CollaboratorRole(str, Enum):
    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"


# Roles an owner may hand out
INVITABLE_ROLES = (CollaboratorRole.EDITOR.value, CollaboratorRole.VIEWER.value)


class ProjectCollaborator(Base):
    """A person invited to a project by email."""

    __tablename__ = "project_collaborators"
    __table_args__ = (
        UniqueConstraint("project_id", "user_email", name="uq_project_collaborator"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    # Stored lowercased
    user_email: Mapped[str] = mapped_column(String(255), index=True)
    role: Mapped[str] = mapped_column(String(20), default=CollaboratorRole.VIEWER.value)
    status: Mapped[str] = mapped_column(String(20), default="active")
    invited_by: Mapped[str] = mapped_column(String(255))
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
