"""Share schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .project import ProjectRead


class ShareSettings(BaseModel):
    is_public: bool = False
    allowed_emails: list[str] = Field(default_factory=list)


class ShareUpdate(BaseModel):
    is_public: bool | None = None
    allowed_emails: list[str] | None = None


class ShareRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    project_id: str
    share_token: str
    is_public: bool
    allowed_emails: list[str]
    created_at: datetime
    updated_at: datetime


class ShareAccessRequest(BaseModel):
    user_email: str | None = None


class SharedProject(BaseModel):
    """Result of resolving a share token.

    A private share resolved without an email carries only the title.
    """

    project: ProjectRead | None = None
    requires_email_verification: bool = False
    project_title: str | None = None
