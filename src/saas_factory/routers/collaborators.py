"""Project collaborators router."""

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import RequestContext, get_context
from ..schemas import ApiResponse, CollaboratorInvite, CollaboratorRead, CollaboratorRoleUpdate
from ..services.collaborators import CollaboratorService

router = APIRouter(prefix="/projects", tags=["collaborators"])


@router.get("/{project_id}/collaborators", response_model=ApiResponse[list[CollaboratorRead]])
async def list_collaborators(project_id: str, ctx: RequestContext = Depends(get_context)):
    """Owner and collaborators. Collaborators are recognized by X-User-Email."""
    members = await CollaboratorService(ctx.backend).list_collaborators(project_id, ctx.user)
    return ApiResponse(data=members)


@router.post(
    "/{project_id}/collaborators",
    response_model=ApiResponse[CollaboratorRead],
    status_code=status.HTTP_201_CREATED,
)
async def invite_collaborator(
    project_id: str,
    invite_in: CollaboratorInvite,
    ctx: RequestContext = Depends(get_context),
):
    collaborator = await CollaboratorService(ctx.backend).invite(project_id, ctx.user, invite_in)
    return ApiResponse(
        data=CollaboratorRead.model_validate(collaborator), message="Collaborator invited"
    )


@router.put("/{project_id}/collaborators", response_model=ApiResponse[CollaboratorRead])
async def update_collaborator(
    project_id: str,
    update_in: CollaboratorRoleUpdate,
    ctx: RequestContext = Depends(get_context),
):
    collaborator = await CollaboratorService(ctx.backend).update_role(
        project_id, ctx.user, update_in
    )
    return ApiResponse(
        data=CollaboratorRead.model_validate(collaborator), message="Collaborator role updated"
    )


@router.delete("/{project_id}/collaborators", response_model=ApiResponse[None])
async def remove_collaborator(
    project_id: str,
    collaborator_id: int = Query(...),
    ctx: RequestContext = Depends(get_context),
):
    await CollaboratorService(ctx.backend).remove(project_id, ctx.user, collaborator_id)
    return ApiResponse(message="Collaborator removed")
