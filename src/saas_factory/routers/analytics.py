"""Analytics router."""

from fastapi import APIRouter, Depends, Query

from ..dependencies import RequestContext, get_context
from ..schemas import ApiResponse
from ..services.analytics import AnalyticsService, TimeRange

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/overview", response_model=ApiResponse[dict])
async def analytics_overview(
    time_range: TimeRange = Query(TimeRange.MONTH, alias="timeRange"),
    ctx: RequestContext = Depends(get_context),
):
    """Counts, trends and breakdowns over the caller's projects."""
    data = await AnalyticsService(ctx.backend).overview(ctx.user, time_range)
    return ApiResponse(data=data)


@router.get("/projects", response_model=ApiResponse[dict])
async def analytics_projects(
    time_range: TimeRange = Query(TimeRange.MONTH, alias="timeRange"),
    sort_by: str = Query("created_at", alias="sortBy"),
    order: str = Query("desc"),
    ctx: RequestContext = Depends(get_context),
):
    """Per-project metrics, a performance analysis and insights."""
    data = await AnalyticsService(ctx.backend).projects(ctx.user, time_range, sort_by, order)
    return ApiResponse(data=data)
