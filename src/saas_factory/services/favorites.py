"""Favorite projects."""

from ..backends import DataBackend
from ..errors import Conflict
from ..identity import CurrentUser
from ..logging import get_logger
from ..models import Project
from .activity import ActivityLog
from .lifecycle import ProjectLifecycle

logger = get_logger(__name__)


class FavoriteService:
    def __init__(self, backend: DataBackend, lifecycle: ProjectLifecycle):
        self.backend = backend
        self.lifecycle = lifecycle
        self.activity = ActivityLog(backend.activities)

    async def add(self, project_id: str, user: CurrentUser) -> None:
        project = await self.lifecycle.get_owned(project_id, user)
        if await self.backend.favorites.exists(project.id, user.id):
            raise Conflict("Project is already in favorites")
        await self.backend.favorites.add(project.id, user.id)
        logger.info("project_favorited", project_id=project.id)
        await self.activity.record(
            project.id, user.id, "project_favorited", f'"{project.title}" was added to favorites'
        )

    async def remove(self, project_id: str, user: CurrentUser) -> None:
        """Idempotent: removing a missing favorite succeeds."""
        project = await self.lifecycle.get_owned(project_id, user)
        if not await self.backend.favorites.exists(project.id, user.id):
            return
        await self.backend.favorites.remove(project.id, user.id)
        logger.info("project_unfavorited", project_id=project.id)
        await self.activity.record(
            project.id,
            user.id,
            "project_unfavorited",
            f'"{project.title}" was removed from favorites',
        )

    async def is_favorite(self, project_id: str, user: CurrentUser) -> bool:
        project = await self.lifecycle.get_owned(project_id, user)
        return await self.backend.favorites.exists(project.id, user.id)

    async def list_projects(self, user: CurrentUser) -> list[Project]:
        return await self.backend.favorites.list_projects(user.id)
