"""Project lifecycle orchestration.

Status transitions:

    draft --generate--> generating --success--> completed --deploy--> deployed
                         generating --failure--> error --generate--> generating

Every transition appends an activity entry. Generation claims the project with
a conditional status update before any external call, so at most one run is
active per project.
"""

import asyncio
from dataclasses import dataclass
from typing import Any
import uuid

from ..backends import DataBackend
from ..config import Settings
from ..errors import AppError, Conflict, GenerationTimeout, NotFound, UpstreamFailure
from ..identity import CurrentUser
from ..logging import get_logger
from ..models import (
    GENERATABLE_STATUSES,
    GenerationLog,
    GenerationStep,
    Project,
    ProjectStatus,
    StepStatus,
)
from ..models.base import utcnow
from ..schemas.progress import ProgressEvent, ProgressEventType
from ..schemas.project import ProjectCreate, ProjectFields
from .activity import ActivityLog
from .progress import GENERATION_STEP_NAMES, start_event

logger = get_logger(__name__)

REQUIREMENT_FIELDS = (
    "title",
    "description",
    "category",
    "features",
    "design_preferences",
    "tech_requirements",
)


def _discard_late_result(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("late_generation_failed", error=str(exc), error_type=type(exc).__name__)
    else:
        logger.info("late_generation_result_discarded")


@dataclass
class _Run:
    """Identity of one generation run, safe to read after a rollback."""

    project_id: str
    title: str
    run_id: str
    user: CurrentUser


class ProjectLifecycle:
    def __init__(self, backend: DataBackend, settings: Settings):
        self.backend = backend
        self.settings = settings
        self.activity = ActivityLog(backend.activities)

    # === Access ===

    async def get_owned(self, project_id: str, user: CurrentUser) -> Project:
        """Load a project the caller owns. Demo data has no ownership."""
        project = await self.backend.projects.get(project_id)
        if project is None:
            raise NotFound("Project not found")
        if not self.backend.is_demo and project.user_id != user.id:
            logger.warning("project_access_denied", project_id=project_id, user_id=user.id)
            raise NotFound("Project not found")
        return project

    # === CRUD ===

    async def create(self, user: CurrentUser, data: ProjectCreate) -> Project:
        project = Project(user_id=user.id, status=ProjectStatus.DRAFT.value, **data.model_dump())
        await self.backend.projects.add(project)
        logger.info("project_created", project_id=project.id, category=project.category)
        await self.activity.record(
            project.id, user.id, "project_created", f'Project "{project.title}" was created'
        )
        return project

    async def list_projects(
        self, user: CurrentUser, page: int = 1, per_page: int = 20
    ) -> tuple[list[Project], int]:
        return await self.backend.projects.list_for_user(
            user.id, offset=(page - 1) * per_page, limit=per_page
        )

    async def get_with_logs(
        self, project_id: str, user: CurrentUser
    ) -> tuple[Project, list[GenerationLog]]:
        project = await self.get_owned(project_id, user)
        logs = await self.backend.logs.list_for_project(project.id)
        return project, logs

    async def update(self, project_id: str, user: CurrentUser, data: ProjectFields) -> Project:
        project = await self.get_owned(project_id, user)
        fields = data.model_dump(exclude_none=True)
        if not fields:
            return project
        await self.backend.projects.update(project, **fields)
        logger.info("project_updated", project_id=project.id, fields=sorted(fields))
        await self.activity.record(
            project.id,
            user.id,
            "project_updated",
            f'Project "{project.title}" was updated',
            {"updated_fields": sorted(fields)},
        )
        return project

    async def delete(self, project_id: str, user: CurrentUser) -> None:
        project = await self.get_owned(project_id, user)
        await self.activity.record(
            project.id, user.id, "project_deleted", f'Project "{project.title}" was deleted'
        )
        await self.backend.projects.delete(project)
        logger.info("project_deleted", project_id=project_id)

    # === Generation ===

    async def generate(
        self, project_id: str, user: CurrentUser, input_data: ProjectFields | None = None
    ) -> Project:
        """Run one generation and wait for it, up to the configured timeout.

        Any failure after the claim marks the project as errored, so it can be
        generated again.

        Raises:
            Conflict: The project is not in draft or error status
            GenerationTimeout: The generator did not answer in time
        """
        project = await self.get_owned(project_id, user)
        fields = input_data.model_dump(exclude_none=True) if input_data else {}
        run_id = uuid.uuid4().hex

        claimed = await self.backend.projects.transition(
            project.id,
            GENERATABLE_STATUSES,
            ProjectStatus.GENERATING.value,
            error_message=None,
            generation_run_id=run_id,
            **fields,
        )
        if not claimed:
            current = await self.backend.projects.get(project.id)
            status = current.status if current else project.status
            logger.warning("generation_rejected", project_id=project.id, status=status)
            raise Conflict(f"Project cannot be generated while it is {status}", status=status)

        project = await self.backend.projects.get(project.id) or project
        run = _Run(project.id, project.title, run_id, user)
        logger.info("generation_started", project_id=run.project_id, run_id=run_id)
        try:
            await self._run_steps(project, run)
        except AppError as e:
            await self._fail(run, e.message)
            raise
        except Exception as e:
            logger.error(
                "generation_failed",
                project_id=run.project_id,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            await self.backend.rollback()
            await self._fail(run, f"Generation failed: {e}")
            raise

        logger.info("generation_completed", project_id=run.project_id, run_id=run_id)
        await self.activity.record(
            run.project_id,
            user.id,
            "project_completed",
            f'Generation of "{run.title}" completed',
        )
        await self.backend.progress.publish(
            ProgressEvent(
                type=ProgressEventType.COMPLETE,
                project_id=run.project_id,
                status=ProjectStatus.COMPLETED.value,
                message="Project generation completed",
                run_id=run_id,
            )
        )
        return project

    async def _run_steps(self, project: Project, run: _Run) -> None:
        await self.activity.record(
            run.project_id,
            run.user.id,
            "project_generating",
            f'Generation of "{run.title}" started',
        )
        progress = self.backend.progress
        await progress.reset(run.project_id)
        await progress.publish(
            start_event(run.project_id, list(GENERATION_STEP_NAMES.items()), run_id=run.run_id)
        )

        log = await self._start_step(run, GenerationStep.ANALYZE, "Analyzing requirements")
        await self._finish_step(run, log, "Requirements analyzed")

        log = await self._start_step(run, GenerationStep.GENERATE_CODE, "Generating code")
        project_data = {key: getattr(project, key) for key in REQUIREMENT_FIELDS}
        artifact = await self._run_generator(project_data)
        await self._finish_step(run, log, "Code generated")

        log = await self._start_step(run, GenerationStep.OPTIMIZE, "Optimizing code")
        await self._finish_step(run, log, "Code optimized")

        log = await self._start_step(run, GenerationStep.FINALIZE, "Finalizing project")
        await self.backend.projects.update(
            project,
            status=ProjectStatus.COMPLETED.value,
            generated_code=artifact,
            completed_at=utcnow(),
            error_message=None,
        )
        await self._finish_step(run, log, "Project generation completed")

    async def _run_generator(self, project_data: dict[str, Any]) -> dict[str, Any]:
        """Wait for the generator without cancelling it on timeout.

        A result arriving after the deadline is logged and dropped.
        """
        timeout = self.settings.generation_timeout_seconds
        task = asyncio.ensure_future(self.backend.generator.generate(project_data))
        try:
            return await asyncio.wait_for(asyncio.shield(task), timeout)
        except TimeoutError:
            task.add_done_callback(_discard_late_result)
            raise GenerationTimeout(
                f"Generation timed out after {timeout:g} seconds. Please try again."
            ) from None
        except AppError:
            raise
        except Exception as e:
            logger.error(
                "generator_failed", error=str(e), error_type=type(e).__name__, exc_info=True
            )
            raise UpstreamFailure(f"AI generation failed: {e}") from e

    async def _start_step(
        self, run: _Run, step: GenerationStep, message: str
    ) -> GenerationLog:
        log = await self.backend.logs.start_step(run.project_id, step.value, message)
        await self.backend.progress.publish(
            ProgressEvent(
                type=ProgressEventType.STEP_PROGRESS,
                project_id=run.project_id,
                step_id=step.value,
                step_name=GENERATION_STEP_NAMES[step.value],
                progress=0,
                message=message,
                run_id=run.run_id,
            )
        )
        return log

    async def _finish_step(self, run: _Run, log: GenerationLog, message: str) -> None:
        await self.backend.logs.finish_step(log, StepStatus.COMPLETED.value, message)
        await self.backend.progress.publish(
            ProgressEvent(
                type=ProgressEventType.STEP_COMPLETE,
                project_id=run.project_id,
                step_id=log.step,
                step_name=GENERATION_STEP_NAMES[log.step],
                progress=100,
                message=message,
                run_id=run.run_id,
            )
        )

    async def _fail(self, run: _Run, message: str) -> None:
        # Logs are re-read: a rollback expires every loaded instance
        for log in await self.backend.logs.list_for_project(run.project_id):
            if log.status == StepStatus.IN_PROGRESS.value:
                await self.backend.logs.finish_step(log, StepStatus.FAILED.value, message)
        await self.backend.projects.transition(
            run.project_id,
            [ProjectStatus.GENERATING.value],
            ProjectStatus.ERROR.value,
            error_message=message,
        )
        logger.warning("generation_marked_failed", project_id=run.project_id, reason=message)
        await self.activity.record(
            run.project_id,
            run.user.id,
            "project_generation_failed",
            f'Generation of "{run.title}" failed',
            {"error": message},
        )
        await self.backend.progress.publish(
            ProgressEvent(
                type=ProgressEventType.COMPLETE,
                project_id=run.project_id,
                status=ProjectStatus.ERROR.value,
                message=message,
                run_id=run.run_id,
            )
        )

    async def generation_status(
        self, project_id: str, user: CurrentUser
    ) -> tuple[Project, list[GenerationLog]]:
        return await self.get_with_logs(project_id, user)

    # === Deployment ===

    async def deploy(
        self,
        project: Project,
        user: CurrentUser,
        repository_url: str | None,
        deployment_url: str,
        metadata: dict[str, Any] | None = None,
    ) -> Project:
        """Record a finished deployment. Only completed projects can be deployed."""
        deployed = await self.backend.projects.transition(
            project.id,
            [ProjectStatus.COMPLETED.value],
            ProjectStatus.DEPLOYED.value,
            repository_url=repository_url,
            deployment_url=deployment_url,
            deployed_at=utcnow(),
        )
        if not deployed:
            raise Conflict(
                f"Project cannot be deployed while it is {project.status}", status=project.status
            )
        project = await self.backend.projects.get(project.id) or project
        logger.info("project_deployed", project_id=project.id, deployment_url=deployment_url)
        await self.activity.record(
            project.id,
            user.id,
            "project_deployed",
            f'Project "{project.title}" was deployed',
            {
                "repository_url": repository_url,
                "deployment_url": deployment_url,
                **(metadata or {}),
            },
        )
        return project
