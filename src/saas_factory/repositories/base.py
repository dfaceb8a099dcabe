"""Per-entity repository interfaces.

Orchestration code talks to these protocols only; the SQL and in-memory
implementations live in sql.py and memory.py.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any, Protocol

from ..models import (
    GenerationLog,
    Project,
    ProjectActivity,
    ProjectCategory,
    ProjectCollaborator,
    ProjectShare,
    ProjectTemplate,
)


class ProjectRepository(Protocol):
    async def get(self, project_id: str) -> Project | None: ...

    async def list_for_user(
        self, user_id: str, offset: int = 0, limit: int | None = None
    ) -> tuple[list[Project], int]:
        """Return one page of the user's projects, newest first, and the total count."""
        ...

    async def count_for_user(self, user_id: str, category: str | None = None) -> int: ...

    async def add(self, project: Project) -> Project: ...

    async def update(self, project: Project, **fields: Any) -> Project: ...

    async def transition(
        self,
        project_id: str,
        from_statuses: Iterable[str],
        to_status: str,
        **fields: Any,
    ) -> bool:
        """Atomically move a project to `to_status` if its current status is allowed.

        Returns False when the project is missing or in another status.
        """
        ...

    async def delete(self, project: Project) -> None: ...


class GenerationLogRepository(Protocol):
    async def start_step(self, project_id: str, step: str, message: str) -> GenerationLog: ...

    async def finish_step(
        self,
        log: GenerationLog,
        status: str,
        message: str,
        details: dict | None = None,
    ) -> GenerationLog: ...

    async def list_for_project(self, project_id: str) -> list[GenerationLog]: ...


class ActivityRepository(Protocol):
    async def append(self, entry: ProjectActivity) -> ProjectActivity: ...

    async def list_for_project(
        self,
        project_id: str,
        limit: int = 20,
        offset: int = 0,
        since: datetime | None = None,
    ) -> list[ProjectActivity]: ...

    async def list_for_user(
        self, user_id: str, since: datetime | None = None, limit: int | None = None
    ) -> list[ProjectActivity]: ...


class ShareRepository(Protocol):
    async def get_for_owner(self, project_id: str, user_id: str) -> ProjectShare | None: ...

    async def get_by_token(self, token: str) -> ProjectShare | None: ...

    async def is_public(self, project_id: str) -> bool: ...

    async def save(self, share: ProjectShare) -> ProjectShare: ...

    async def delete(self, share: ProjectShare) -> None: ...


class FavoriteRepository(Protocol):
    async def exists(self, project_id: str, user_id: str) -> bool: ...

    async def add(self, project_id: str, user_id: str) -> None: ...

    async def remove(self, project_id: str, user_id: str) -> None: ...

    async def list_projects(self, user_id: str) -> list[Project]: ...

    async def count_for_user(self, user_id: str) -> int: ...


class CategoryRepository(Protocol):
    async def get(self, category_id: str) -> ProjectCategory | None: ...

    async def list_for_user(self, user_id: str) -> list[ProjectCategory]: ...

    async def find_by_name(self, name: str, user_id: str) -> ProjectCategory | None: ...

    async def add(self, category: ProjectCategory) -> ProjectCategory: ...

    async def update(self, category: ProjectCategory, **fields: Any) -> ProjectCategory: ...

    async def delete(self, category: ProjectCategory) -> None: ...


class TemplateRepository(Protocol):
    async def get(self, template_id: str) -> ProjectTemplate | None: ...

    async def add(self, template: ProjectTemplate) -> ProjectTemplate: ...

    async def increment_usage(self, template: ProjectTemplate) -> ProjectTemplate: ...


class CollaboratorRepository(Protocol):
    async def get(self, collaborator_id: int) -> ProjectCollaborator | None: ...

    async def find(self, project_id: str, user_email: str) -> ProjectCollaborator | None: ...

    async def list_for_project(self, project_id: str) -> list[ProjectCollaborator]:
        """Oldest invitation first."""
        ...

    async def add(self, collaborator: ProjectCollaborator) -> ProjectCollaborator: ...

    async def update(
        self, collaborator: ProjectCollaborator, **fields: Any
    ) -> ProjectCollaborator: ...

    async def delete(self, collaborator: ProjectCollaborator) -> None: ...
