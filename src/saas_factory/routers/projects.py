"""Projects router."""

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import RequestContext, get_context
from ..schemas import (
    ActivityRead,
    ApiResponse,
    CloneRequest,
    GenerationLogRead,
    ProjectCreate,
    ProjectDetail,
    ProjectPage,
    ProjectRead,
    ProjectUpdate,
)
from ..services.activity import ActivityLog
from ..services.cloning import CloneService
from ..services.lifecycle import ProjectLifecycle

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=ApiResponse[ProjectPage])
async def list_projects(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    ctx: RequestContext = Depends(get_context),
):
    """List the caller's projects, newest first."""
    projects, total = await ProjectLifecycle(ctx.backend, ctx.settings).list_projects(
        ctx.user, page=page, per_page=per_page
    )
    return ApiResponse(
        data=ProjectPage(
            projects=[ProjectRead.model_validate(p) for p in projects],
            total=total,
            page=page,
            per_page=per_page,
        )
    )


@router.post("", response_model=ApiResponse[ProjectRead], status_code=status.HTTP_201_CREATED)
async def create_project(
    project_in: ProjectCreate,
    ctx: RequestContext = Depends(get_context),
):
    """Create a draft project."""
    project = await ProjectLifecycle(ctx.backend, ctx.settings).create(ctx.user, project_in)
    return ApiResponse(data=ProjectRead.model_validate(project), message="Project created")


@router.get("/{project_id}", response_model=ApiResponse[ProjectDetail])
async def get_project(project_id: str, ctx: RequestContext = Depends(get_context)):
    """Get a project with its generation logs."""
    project, logs = await ProjectLifecycle(ctx.backend, ctx.settings).get_with_logs(
        project_id, ctx.user
    )
    detail = ProjectDetail.model_validate(project)
    detail.generation_logs = [GenerationLogRead.model_validate(log) for log in logs]
    return ApiResponse(data=detail)


@router.put("/{project_id}", response_model=ApiResponse[ProjectRead])
async def update_project(
    project_id: str,
    project_in: ProjectUpdate,
    ctx: RequestContext = Depends(get_context),
):
    """Partial update of the requirement fields."""
    project = await ProjectLifecycle(ctx.backend, ctx.settings).update(
        project_id, ctx.user, project_in
    )
    return ApiResponse(data=ProjectRead.model_validate(project), message="Project updated")


@router.delete("/{project_id}", response_model=ApiResponse[None])
async def delete_project(project_id: str, ctx: RequestContext = Depends(get_context)):
    await ProjectLifecycle(ctx.backend, ctx.settings).delete(project_id, ctx.user)
    return ApiResponse(message="Project deleted")


@router.get("/{project_id}/activity", response_model=ApiResponse[list[ActivityRead]])
async def list_activity(
    project_id: str,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    ctx: RequestContext = Depends(get_context),
):
    """Project history, newest first."""
    project = await ProjectLifecycle(ctx.backend, ctx.settings).get_owned(project_id, ctx.user)
    entries = await ActivityLog(ctx.backend.activities).list_entries(
        project.id, limit=limit, offset=offset
    )
    return ApiResponse(data=[ActivityRead.model_validate(e) for e in entries])


@router.post(
    "/{project_id}/clone",
    response_model=ApiResponse[ProjectRead],
    status_code=status.HTTP_201_CREATED,
)
async def clone_project(
    project_id: str,
    clone_in: CloneRequest | None = None,
    ctx: RequestContext = Depends(get_context),
):
    """Copy an own or publicly shared project into a new draft."""
    clone = await CloneService(ctx.backend).clone(project_id, ctx.user, clone_in or CloneRequest())
    return ApiResponse(data=ProjectRead.model_validate(clone), message="Project cloned")
