"""Collaborator schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

InvitableRole = Literal["editor", "viewer"]


class CollaboratorInvite(BaseModel):
    user_email: str | None = None
    role: InvitableRole = "viewer"


class CollaboratorRoleUpdate(BaseModel):
    collaborator_id: int
    role: InvitableRole


class CollaboratorRead(BaseModel):
    """One member of a project. The owner row has no id."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    project_id: str
    user_id: str | None = None
    user_email: str | None = None
    role: str
    status: str = "active"
    invited_by: str | None = None
    joined_at: datetime | None = None
    is_owner: bool = False
