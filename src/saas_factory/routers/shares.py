"""Share settings (owner side) and share-token resolution (visitor side)."""

from fastapi import APIRouter, Depends, status

from ..dependencies import RequestContext, get_context, get_public_context
from ..schemas import (
    ApiResponse,
    ProjectRead,
    ShareAccessRequest,
    SharedProject,
    ShareRead,
    ShareSettings,
    ShareUpdate,
)
from ..services.lifecycle import ProjectLifecycle
from ..services.sharing import ShareService

router = APIRouter(prefix="/projects", tags=["shares"])
shared_router = APIRouter(prefix="/shared", tags=["shares"])


def _service(ctx: RequestContext) -> ShareService:
    return ShareService(ctx.backend, ProjectLifecycle(ctx.backend, ctx.settings))


@router.get("/{project_id}/share", response_model=ApiResponse[ShareRead | None])
async def get_share(project_id: str, ctx: RequestContext = Depends(get_context)):
    share = await _service(ctx).get(project_id, ctx.user)
    return ApiResponse(data=ShareRead.model_validate(share) if share else None)


@router.post(
    "/{project_id}/share",
    response_model=ApiResponse[ShareRead],
    status_code=status.HTTP_201_CREATED,
)
async def share_project(
    project_id: str,
    settings_in: ShareSettings,
    ctx: RequestContext = Depends(get_context),
):
    """Share a project. Issues a new token, invalidating any previous link."""
    share = await _service(ctx).share(project_id, ctx.user, settings_in)
    return ApiResponse(data=ShareRead.model_validate(share), message="Share link created")


@router.put("/{project_id}/share", response_model=ApiResponse[ShareRead])
async def update_share(
    project_id: str,
    update_in: ShareUpdate,
    ctx: RequestContext = Depends(get_context),
):
    share = await _service(ctx).update(project_id, ctx.user, update_in)
    return ApiResponse(data=ShareRead.model_validate(share), message="Share settings updated")


@router.delete("/{project_id}/share", response_model=ApiResponse[None])
async def unshare_project(project_id: str, ctx: RequestContext = Depends(get_context)):
    await _service(ctx).unshare(project_id, ctx.user)
    return ApiResponse(message="Sharing stopped")


@shared_router.get("/{token}", response_model=ApiResponse[SharedProject])
async def get_shared_project(token: str, ctx: RequestContext = Depends(get_public_context)):
    """Open a share link. Private links ask for an email first."""
    project, title = await _service(ctx).preview(token)
    if project is None:
        return ApiResponse(
            data=SharedProject(requires_email_verification=True, project_title=title)
        )
    return ApiResponse(
        data=SharedProject(project=ProjectRead.model_validate(project), project_title=title)
    )


@shared_router.post("/{token}", response_model=ApiResponse[SharedProject])
async def access_shared_project(
    token: str,
    access_in: ShareAccessRequest,
    ctx: RequestContext = Depends(get_public_context),
):
    """Open a private share link with the visitor's email."""
    project = await _service(ctx).resolve(token, access_in.user_email)
    return ApiResponse(
        data=SharedProject(project=ProjectRead.model_validate(project), project_title=project.title)
    )
