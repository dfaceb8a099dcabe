"""Project cloning."""

from ..backends import DataBackend
from ..errors import NotFound
from ..identity import CurrentUser
from ..logging import get_logger
from ..models import Project, ProjectStatus
from ..schemas.project import CloneRequest
from .activity import ActivityLog

logger = get_logger(__name__)


class CloneService:
    def __init__(self, backend: DataBackend):
        self.backend = backend
        self.activity = ActivityLog(backend.activities)

    async def _source(self, project_id: str, user: CurrentUser) -> Project:
        """The source must be the caller's own project or publicly shared."""
        project = await self.backend.projects.get(project_id)
        if project is None:
            raise NotFound("Project not found")
        if self.backend.is_demo or project.user_id == user.id:
            return project
        if await self.backend.shares.is_public(project.id):
            return project
        raise NotFound("Project not found")

    async def clone(self, project_id: str, user: CurrentUser, request: CloneRequest) -> Project:
        source = await self._source(project_id, user)
        options = request.clone_settings
        description = source.description if request.description is None else request.description

        clone = Project(
            user_id=user.id,
            title=request.title or f"{source.title} (copy)",
            description=description,
            category=request.category or source.category,
            features=source.features,
            design_preferences=source.design_preferences,
            tech_requirements=source.tech_requirements,
            status=ProjectStatus.DRAFT.value,
        )
        if options.include_generated_code and source.generated_code is not None:
            clone.generated_code = dict(source.generated_code)
        if options.include_deployment_settings:
            clone.repository_url = source.repository_url
            clone.deployment_url = source.deployment_url

        await self.backend.projects.add(clone)
        logger.info("project_cloned", project_id=clone.id, original_project_id=source.id)
        await self.activity.record(
            clone.id,
            user.id,
            "project_cloned",
            f'Cloned from "{source.title}"',
            {
                "original_project_id": source.id,
                "clone_settings": options.model_dump(),
            },
        )
        return clone
