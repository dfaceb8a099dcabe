"""Templates router."""

from fastapi import APIRouter, Depends, status

from ..dependencies import RequestContext, get_context
from ..schemas import ApiResponse, ProjectRead, TemplateCreate, TemplateRead, TemplateUseRequest
from ..services.lifecycle import ProjectLifecycle
from ..services.templates import TemplateService

router = APIRouter(prefix="/templates", tags=["templates"])


def _service(ctx: RequestContext) -> TemplateService:
    return TemplateService(ctx.backend, ProjectLifecycle(ctx.backend, ctx.settings))


@router.post("", response_model=ApiResponse[TemplateRead], status_code=status.HTTP_201_CREATED)
async def create_template(template_in: TemplateCreate, ctx: RequestContext = Depends(get_context)):
    """Save one of the caller's projects as a reusable template."""
    template = await _service(ctx).create(ctx.user, template_in)
    return ApiResponse(data=TemplateRead.model_validate(template), message="Template created")


@router.post(
    "/{template_id}/use",
    response_model=ApiResponse[ProjectRead],
    status_code=status.HTTP_201_CREATED,
)
async def use_template(
    template_id: str,
    use_in: TemplateUseRequest | None = None,
    ctx: RequestContext = Depends(get_context),
):
    """Start a draft project from a preset or saved template."""
    project = await _service(ctx).use(template_id, ctx.user, use_in or TemplateUseRequest())
    return ApiResponse(
        data=ProjectRead.model_validate(project), message="Project created from template"
    )
