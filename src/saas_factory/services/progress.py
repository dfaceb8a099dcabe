"""Generation progress reporting.

Push mode produces ProgressEvent sequences: either a simulated run driven by a
timer, or the live events of a real run relayed from Redis.
"""

import asyncio
from collections.abc import AsyncGenerator, AsyncIterator, Awaitable, Callable
from typing import Protocol

from redis.exceptions import RedisError

from ..clients.progress_stream import ProgressStreamClient
from ..logging import get_logger
from ..models import GenerationStep, Project
from ..schemas.progress import ProgressEvent, ProgressEventType, StepState

logger = get_logger(__name__)

SIMULATED_STEPS: list[tuple[str, str]] = [
    ("analyze", "Analyzing requirements"),
    ("design", "Designing architecture"),
    ("generate_code", "Generating code"),
    ("create_database", "Creating database"),
    ("setup_auth", "Setting up authentication"),
    ("optimize", "Optimizing code"),
    ("test", "Generating tests"),
    ("finalize", "Finalizing"),
]

GENERATION_STEP_NAMES: dict[str, str] = {
    GenerationStep.ANALYZE.value: "Analyzing requirements",
    GenerationStep.GENERATE_CODE.value: "Generating code",
    GenerationStep.OPTIMIZE.value: "Optimizing code",
    GenerationStep.FINALIZE.value: "Finalizing",
}

STEP_INCREMENT = 20


def start_event(
    project_id: str, steps: list[tuple[str, str]], run_id: str | None = None
) -> ProgressEvent:
    return ProgressEvent(
        type=ProgressEventType.START,
        project_id=project_id,
        steps=[StepState(id=step_id, name=name) for step_id, name in steps],
        run_id=run_id,
    )


async def simulated_progress(
    project_id: str,
    tick_seconds: float = 0.5,
    steps: list[tuple[str, str]] = SIMULATED_STEPS,
    increment: int = STEP_INCREMENT,
) -> AsyncIterator[ProgressEvent]:
    """Drive a fake run: each tick adds `increment` percent to the current step.

    Emits one `start`, then per step `step_progress` events and a final
    `step_complete`, then one `complete`. Closing the generator stops the timer.
    """
    yield start_event(project_id, steps)

    for step_id, name in steps:
        progress = 0
        while True:
            await asyncio.sleep(tick_seconds)
            progress += increment
            if progress >= 100:
                yield ProgressEvent(
                    type=ProgressEventType.STEP_COMPLETE,
                    project_id=project_id,
                    step_id=step_id,
                    step_name=name,
                    progress=100,
                )
                break
            yield ProgressEvent(
                type=ProgressEventType.STEP_PROGRESS,
                project_id=project_id,
                step_id=step_id,
                step_name=name,
                progress=progress,
            )

    await asyncio.sleep(tick_seconds)
    yield ProgressEvent(
        type=ProgressEventType.COMPLETE,
        project_id=project_id,
        status="completed",
        message="Project generation completed",
    )


async def settled_progress(project: Project) -> AsyncIterator[ProgressEvent]:
    """Report the state of a project with no run in flight, then end."""
    yield ProgressEvent(
        type=ProgressEventType.COMPLETE,
        project_id=project.id,
        status=project.status,
        message=project.error_message or f"Project is {project.status}",
        run_id=project.generation_run_id,
    )


async def sse_messages(
    events: AsyncGenerator[ProgressEvent, None],
    is_disconnected: Callable[[], Awaitable[bool]],
) -> AsyncIterator[str]:
    """Format events as server-sent events until the stream ends or the client leaves."""
    try:
        async for event in events:
            if await is_disconnected():
                logger.info("progress_stream_client_disconnected", project_id=event.project_id)
                break
            yield event.to_sse()
    finally:
        await events.aclose()


class ProgressPublisher(Protocol):
    async def reset(self, project_id: str) -> None: ...

    async def publish(self, event: ProgressEvent) -> None: ...


class NullProgressPublisher:
    """Used when no live stream is configured: poll mode still works."""

    async def reset(self, project_id: str) -> None:
        return None

    async def publish(self, event: ProgressEvent) -> None:
        return None


class RedisProgressPublisher:
    """Best-effort publisher: a Redis outage never fails a generation run."""

    def __init__(self, client: ProgressStreamClient):
        self.client = client

    async def reset(self, project_id: str) -> None:
        try:
            await self.client.reset(project_id)
        except RedisError as e:
            logger.warning("progress_reset_failed", project_id=project_id, error=str(e))

    async def publish(self, event: ProgressEvent) -> None:
        try:
            await self.client.publish(event)
        except RedisError as e:
            logger.warning(
                "progress_publish_failed",
                project_id=event.project_id,
                type=event.type,
                error=str(e),
            )
