"""Generation router: run a generation, poll it, or stream its progress."""

from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..config import Settings, get_settings
from ..dependencies import (
    get_db_session_maker,
    get_progress_stream,
    is_demo_project,
    open_context,
)
from ..errors import ServiceUnavailable
from ..logging import get_logger
from ..models import GenerationLog, Project, ProjectStatus
from ..schemas import ApiResponse, GenerateRequest, GenerationLogRead, GenerationStatus
from ..services.lifecycle import ProjectLifecycle
from ..services.progress import settled_progress, simulated_progress, sse_messages

logger = get_logger(__name__)

router = APIRouter(prefix="/projects", tags=["generation"])

SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}


def _status(project: Project, logs: list[GenerationLog]) -> GenerationStatus:
    return GenerationStatus(
        project_id=project.id,
        project_status=project.status,
        generated_code=project.generated_code,
        error_message=project.error_message,
        generation_logs=[GenerationLogRead.model_validate(log) for log in logs],
    )


@router.post("/generate", response_model=ApiResponse[GenerationStatus])
async def generate_project(
    body: GenerateRequest,
    request: Request,
    demo: bool = Query(False),
    x_user_id: str | None = Header(None),
    x_user_email: str | None = Header(None),
    settings: Settings = Depends(get_settings),
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_db_session_maker),
):
    """Generate code for a project and wait for the result.

    Demo projects are always generated by the demo backend.
    """
    use_demo = demo or is_demo_project(body.project_id)
    async with open_context(
        request, settings, session_maker, use_demo, x_user_id, x_user_email
    ) as ctx:
        lifecycle = ProjectLifecycle(ctx.backend, ctx.settings)
        project = await lifecycle.generate(body.project_id, ctx.user, body.project_data)
        logs = await ctx.backend.logs.list_for_project(project.id)
        return ApiResponse(data=_status(project, logs), message="Project generation completed")


@router.get("/generate", response_model=ApiResponse[GenerationStatus])
async def get_generation_status(
    request: Request,
    project_id: str = Query(..., min_length=1),
    demo: bool = Query(False),
    x_user_id: str | None = Header(None),
    x_user_email: str | None = Header(None),
    settings: Settings = Depends(get_settings),
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_db_session_maker),
):
    """Poll a project's status, artifact and step logs."""
    use_demo = demo or is_demo_project(project_id)
    async with open_context(
        request, settings, session_maker, use_demo, x_user_id, x_user_email
    ) as ctx:
        project, logs = await ProjectLifecycle(ctx.backend, ctx.settings).generation_status(
            project_id, ctx.user
        )
        return ApiResponse(data=_status(project, logs))


@router.get("/generate/stream")
async def stream_generation(
    request: Request,
    project_id: str = Query(..., min_length=1),
    demo: bool = Query(False),
    x_user_id: str | None = Header(None),
    x_user_email: str | None = Header(None),
    settings: Settings = Depends(get_settings),
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_db_session_maker),
) -> StreamingResponse:
    """Server-sent progress events.

    Demo requests get a simulated run. Live requests relay the events the
    running generation publishes to Redis; a project with no run in flight
    gets one `complete` event with its current status.
    """
    if settings.demo_mode or demo or is_demo_project(project_id):
        events = simulated_progress(project_id, tick_seconds=settings.progress_tick_seconds)
    else:
        async with open_context(
            request, settings, session_maker, False, x_user_id, x_user_email
        ) as ctx:
            project = await ProjectLifecycle(ctx.backend, ctx.settings).get_owned(
                project_id, ctx.user
            )

        if project.status != ProjectStatus.GENERATING.value:
            events = settled_progress(project)
        else:
            progress_stream = get_progress_stream(request)
            if progress_stream is None:
                raise ServiceUnavailable(
                    "Live progress streaming is not configured. Set REDIS_URL to enable it."
                )
            events = progress_stream.tail(
                project_id,
                run_id=project.generation_run_id,
                block_ms=settings.progress_stream_block_ms,
            )

    logger.info("progress_stream_opened", project_id=project_id)
    return StreamingResponse(
        sse_messages(events, request.is_disconnected),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
