"""Activity schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ActivityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    project_id: str
    user_id: str
    action: str
    description: str
    metadata: dict[str, Any] | None = Field(None, validation_alias="metadata_")
    created_at: datetime
