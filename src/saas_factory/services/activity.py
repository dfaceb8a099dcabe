"""Project activity trail."""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from ..logging import get_logger
from ..models import ProjectActivity
from ..repositories import ActivityRepository

logger = get_logger(__name__)


class ActivityLog:
    def __init__(self, repository: ActivityRepository):
        self.repository = repository

    async def record(
        self,
        project_id: str,
        user_id: str,
        action: str,
        description: str,
        metadata: dict[str, Any] | None = None,
    ) -> ProjectActivity | None:
        """Append an entry. Failures are logged and never reach the caller."""
        entry = ProjectActivity(
            project_id=project_id,
            user_id=user_id,
            action=action,
            description=description,
            metadata_=metadata,
        )
        try:
            return await self.repository.append(entry)
        except SQLAlchemyError as e:
            logger.warning(
                "activity_record_failed",
                project_id=project_id,
                action=action,
                error=str(e),
            )
            return None

    async def list_entries(
        self, project_id: str, limit: int = 20, offset: int = 0
    ) -> list[ProjectActivity]:
        return await self.repository.list_for_project(project_id, limit=limit, offset=offset)
