"""Categories router."""

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import RequestContext, get_context
from ..schemas import ApiResponse, CategoryCreate, CategoryRead, CategoryUpdate
from ..services.categories import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=ApiResponse[list[CategoryRead]])
async def list_categories(
    include_stats: bool = Query(False),
    ctx: RequestContext = Depends(get_context),
):
    """System categories plus the caller's own."""
    categories = await CategoryService(ctx.backend).list_categories(
        ctx.user, include_stats=include_stats
    )
    return ApiResponse(data=categories)


@router.post("", response_model=ApiResponse[CategoryRead], status_code=status.HTTP_201_CREATED)
async def create_category(category_in: CategoryCreate, ctx: RequestContext = Depends(get_context)):
    category = await CategoryService(ctx.backend).create(ctx.user, category_in)
    return ApiResponse(data=category, message="Category created")


@router.put("/{category_id}", response_model=ApiResponse[CategoryRead])
async def update_category(
    category_id: str,
    category_in: CategoryUpdate,
    ctx: RequestContext = Depends(get_context),
):
    category = await CategoryService(ctx.backend).update(category_id, ctx.user, category_in)
    return ApiResponse(data=category, message="Category updated")


@router.delete("/{category_id}", response_model=ApiResponse[None])
async def delete_category(category_id: str, ctx: RequestContext = Depends(get_context)):
    await CategoryService(ctx.backend).delete(category_id, ctx.user)
    return ApiResponse(message="Category deleted")
