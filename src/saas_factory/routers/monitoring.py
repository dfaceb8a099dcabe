"""Monitoring router."""

from fastapi import APIRouter, Depends, Query

from ..dependencies import RequestContext, get_context
from ..models.base import utcnow
from ..schemas import ApiResponse
from ..services.lifecycle import ProjectLifecycle
from ..services.monitoring import Metric, MonitoringService

router = APIRouter(prefix="/monitoring", tags=["monitoring"])


@router.get("/projects/{project_id}", response_model=ApiResponse[dict])
async def project_metrics(
    project_id: str,
    metric: Metric = Query(Metric.ALL),
    ctx: RequestContext = Depends(get_context),
):
    project = await ProjectLifecycle(ctx.backend, ctx.settings).get_owned(project_id, ctx.user)
    data = await MonitoringService(ctx.backend).collect(project.id, metric)
    data["project_id"] = project.id
    data["timestamp"] = utcnow().isoformat()
    return ApiResponse(data=data)
