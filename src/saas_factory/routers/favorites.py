"""Favorites router."""

from fastapi import APIRouter, Depends, status

from ..dependencies import RequestContext, get_context
from ..schemas import ApiResponse, FavoriteStatus, ProjectRead
from ..services.favorites import FavoriteService
from ..services.lifecycle import ProjectLifecycle

router = APIRouter(prefix="/projects", tags=["favorites"])


def _service(ctx: RequestContext) -> FavoriteService:
    return FavoriteService(ctx.backend, ProjectLifecycle(ctx.backend, ctx.settings))


@router.get("/favorites", response_model=ApiResponse[list[ProjectRead]])
async def list_favorites(ctx: RequestContext = Depends(get_context)):
    projects = await _service(ctx).list_projects(ctx.user)
    return ApiResponse(data=[ProjectRead.model_validate(p) for p in projects])


@router.post(
    "/{project_id}/favorite",
    response_model=ApiResponse[FavoriteStatus],
    status_code=status.HTTP_201_CREATED,
)
async def add_favorite(project_id: str, ctx: RequestContext = Depends(get_context)):
    await _service(ctx).add(project_id, ctx.user)
    return ApiResponse(
        data=FavoriteStatus(project_id=project_id, is_favorite=True),
        message="Added to favorites",
    )


@router.delete("/{project_id}/favorite", response_model=ApiResponse[FavoriteStatus])
async def remove_favorite(project_id: str, ctx: RequestContext = Depends(get_context)):
    await _service(ctx).remove(project_id, ctx.user)
    return ApiResponse(
        data=FavoriteStatus(project_id=project_id, is_favorite=False),
        message="Removed from favorites",
    )


@router.get("/{project_id}/favorite", response_model=ApiResponse[FavoriteStatus])
async def get_favorite(project_id: str, ctx: RequestContext = Depends(get_context)):
    is_favorite = await _service(ctx).is_favorite(project_id, ctx.user)
    return ApiResponse(data=FavoriteStatus(project_id=project_id, is_favorite=is_favorite))
