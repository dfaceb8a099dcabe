"""Project templates: creating them from projects and starting projects from them."""

from ..backends import DataBackend
from ..catalog import PRESET_TEMPLATES
from ..errors import NotFound, PermissionDenied, ValidationError
from ..identity import CurrentUser
from ..logging import get_logger
from ..models import Project, ProjectStatus, ProjectTemplate
from ..schemas.template import TemplateCreate, TemplateUseRequest
from .activity import ActivityLog
from .lifecycle import ProjectLifecycle

logger = get_logger(__name__)

TEMPLATE_REQUIRED_FIELDS = ("name", "description", "category", "project_id")


class TemplateService:
    def __init__(self, backend: DataBackend, lifecycle: ProjectLifecycle):
        self.backend = backend
        self.lifecycle = lifecycle
        self.activity = ActivityLog(backend.activities)

    async def create(self, user: CurrentUser, data: TemplateCreate) -> ProjectTemplate:
        missing = [field for field in TEMPLATE_REQUIRED_FIELDS if not getattr(data, field)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        project = await self.lifecycle.get_owned(data.project_id, user)
        template = ProjectTemplate(
            name=data.name,
            description=data.description,
            category=data.category,
            tags=list(data.tags),
            project_id=project.id,
            features=project.features,
            design_preferences=project.design_preferences,
            tech_requirements=project.tech_requirements,
            is_public=data.is_public,
            created_by=user.id,
        )
        await self.backend.templates.add(template)
        logger.info("template_created", template_id=template.id, project_id=project.id)
        return template

    async def _resolve(self, template_id: str, user: CurrentUser) -> dict:
        preset = PRESET_TEMPLATES.get(template_id)
        if preset is not None:
            return preset

        template = await self.backend.templates.get(template_id)
        if template is None:
            raise NotFound("Template not found")
        if not template.is_public and template.created_by != user.id:
            raise PermissionDenied("This template is private")
        await self.backend.templates.increment_usage(template)
        return {
            "name": template.name,
            "category": template.category,
            "features": template.features,
            "design_preferences": template.design_preferences,
            "tech_requirements": template.tech_requirements,
        }

    async def use(
        self, template_id: str, user: CurrentUser, request: TemplateUseRequest
    ) -> Project:
        """Start a draft project from a preset or user template."""
        template = await self._resolve(template_id, user)
        customize = request.customize

        project = Project(
            user_id=user.id,
            title=request.title or f"{template['name']} project",
            description=request.description or f"Created from the {template['name']} template",
            category=template["category"],
            features=customize.features or template["features"],
            design_preferences=customize.design_preferences or template["design_preferences"],
            tech_requirements=customize.tech_requirements or template["tech_requirements"],
            status=ProjectStatus.DRAFT.value,
        )
        await self.backend.projects.add(project)
        logger.info("project_created_from_template", project_id=project.id, template_id=template_id)
        await self.activity.record(
            project.id,
            user.id,
            "project_created_from_template",
            f'Project created from template "{template["name"]}"',
            {"template_id": template_id, "template_name": template["name"]},
        )
        return project
