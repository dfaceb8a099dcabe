"""Deployment router: one-click and direct Vercel."""

from fastapi import APIRouter, Depends

from ..dependencies import RequestContext, get_context
from ..schemas import ApiResponse, OneClickDeployRequest, VercelDeployRequest
from ..services.deployment import one_click_deploy, vercel_deploy
from ..services.lifecycle import ProjectLifecycle

router = APIRouter(prefix="/projects", tags=["deploy"])


@router.post("/{project_id}/deploy/one-click", response_model=ApiResponse[dict])
async def deploy_one_click(
    project_id: str,
    deploy_in: OneClickDeployRequest,
    ctx: RequestContext = Depends(get_context),
):
    """Create a GitHub repository and a Vercel deployment for a completed project."""
    lifecycle = ProjectLifecycle(ctx.backend, ctx.settings)
    project, result = await one_click_deploy(
        lifecycle, ctx.backend.deployer, project_id, ctx.user, deploy_in
    )
    data = result.model_dump()
    data["project_id"] = project.id
    data["project_status"] = project.status
    return ApiResponse(data=data, message="Project deployed")


@router.post("/{project_id}/deploy/vercel", response_model=ApiResponse[dict])
async def deploy_vercel(
    project_id: str,
    deploy_in: VercelDeployRequest,
    ctx: RequestContext = Depends(get_context),
):
    """Create a Vercel project for a completed project, linked to `github_repo` if given."""
    lifecycle = ProjectLifecycle(ctx.backend, ctx.settings)
    project, result = await vercel_deploy(
        lifecycle, ctx.backend.deployer, project_id, ctx.user, deploy_in
    )
    data = result.model_dump()
    data["project_id"] = project.id
    data["project_status"] = project.status
    return ApiResponse(data=data, message="Project deployed to Vercel")
