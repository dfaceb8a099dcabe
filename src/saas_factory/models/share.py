"""Project share settings model."""

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ProjectShare(Base):
    """Bearer-token access to a project's read view."""

    __tablename__ = "project_shares"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_project_share_owner"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[str] = mapped_column(String(255))
    share_token: Mapped[str] = mapped_column(String(128), unique=True, index=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    allowed_emails: Mapped[list] = mapped_column(JSON, default=list)
