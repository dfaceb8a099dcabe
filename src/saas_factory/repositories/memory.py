"""In-memory repositories backing demo mode.

All demo requests share one process-wide DemoStore, so writes made through one
request are visible to the next.
"""

from collections.abc import Iterable
from datetime import datetime
import itertools
from typing import Any

from sqlalchemy import inspect

from ..demo_data import DEMO_COLLABORATORS, DEMO_GENERATION_LOGS, DEMO_PROJECTS
from ..models import (
    GenerationLog,
    Project,
    ProjectActivity,
    ProjectCategory,
    ProjectCollaborator,
    ProjectFavorite,
    ProjectShare,
    ProjectTemplate,
    StepStatus,
)
from ..models.base import Base, utcnow


def apply_defaults(obj: Base) -> Base:
    """Fill unset columns with their declared defaults, as an INSERT would."""
    for attr in inspect(type(obj)).column_attrs:
        if getattr(obj, attr.key) is not None:
            continue
        default = attr.columns[0].default
        if default is None:
            continue
        value = default.arg
        if callable(value):
            value = value(None)
        setattr(obj, attr.key, value)
    return obj


def _newest_first(items: Iterable[Any]) -> list[Any]:
    return sorted(items, key=lambda i: (i.created_at, i.id), reverse=True)


# Visitor-created rows kept per collection; the oldest are dropped first
DEMO_MAX_ROWS = 1000


class DemoStore:
    """Process-wide demo state.

    Seeded rows are permanent. Rows written by visitors are capped at
    `max_rows` per collection.
    """

    def __init__(self, max_rows: int = DEMO_MAX_ROWS) -> None:
        self.max_rows = max_rows
        self.reset()

    def reset(self) -> None:
        self.projects: dict[str, Project] = {}
        self.logs: list[GenerationLog] = []
        self.activities: list[ProjectActivity] = []
        self.shares: list[ProjectShare] = []
        self.favorites: list[ProjectFavorite] = []
        self.collaborators: list[ProjectCollaborator] = []
        self.categories: dict[str, ProjectCategory] = {}
        self.templates: dict[str, ProjectTemplate] = {}
        self._ids = itertools.count(1)

        for data in DEMO_PROJECTS:
            project = apply_defaults(Project(**data))
            self.projects[project.id] = project
        for data in DEMO_GENERATION_LOGS:
            self.logs.append(apply_defaults(GenerationLog(id=self.next_id(), **data)))
        for data in DEMO_COLLABORATORS:
            collaborator = ProjectCollaborator(id=self.next_id(), **data)
            self.collaborators.append(apply_defaults(collaborator))
        self._seeded_projects = set(self.projects)
        # Integer ids below this belong to seeded rows
        self._first_visitor_id = self.next_id()

    def next_id(self) -> int:
        return next(self._ids)

    def drop_project(self, project_id: str) -> None:
        self.projects.pop(project_id, None)
        self.logs = [log for log in self.logs if log.project_id != project_id]
        self.favorites = [f for f in self.favorites if f.project_id != project_id]
        self.shares = [s for s in self.shares if s.project_id != project_id]
        self.collaborators = [c for c in self.collaborators if c.project_id != project_id]

    def prune(self) -> None:
        """Drop the oldest visitor rows of every collection over `max_rows`."""
        visitor_projects = [p for p in self.projects.values() if p.id not in self._seeded_projects]
        overflow = len(visitor_projects) - self.max_rows
        if overflow > 0:
            for project in _newest_first(visitor_projects)[-overflow:]:
                self.drop_project(project.id)

        self.logs = self._capped(self.logs)
        self.activities = self._capped(self.activities)
        self.shares = self._capped(self.shares)
        self.favorites = self._capped(self.favorites)
        self.collaborators = self._capped(self.collaborators)

        for rows in (self.categories, self.templates):
            overflow = len(rows) - self.max_rows
            if overflow > 0:
                for row in _newest_first(rows.values())[-overflow:]:
                    rows.pop(row.id, None)

    def _capped(self, rows: list[Any]) -> list[Any]:
        visitor = [r for r in rows if r.id >= self._first_visitor_id]
        overflow = len(visitor) - self.max_rows
        if overflow <= 0:
            return rows
        dropped = {r.id for r in sorted(visitor, key=lambda r: r.id)[:overflow]}
        return [r for r in rows if r.id not in dropped]


_store: DemoStore | None = None


def get_demo_store() -> DemoStore:
    global _store
    if _store is None:
        _store = DemoStore()
    return _store


class MemoryProjectRepository:
    def __init__(self, store: DemoStore):
        self.store = store

    async def get(self, project_id: str) -> Project | None:
        return self.store.projects.get(project_id)

    async def list_for_user(
        self, user_id: str, offset: int = 0, limit: int | None = None
    ) -> tuple[list[Project], int]:
        owned = _newest_first(p for p in self.store.projects.values() if p.user_id == user_id)
        end = None if limit is None else offset + limit
        return owned[offset:end], len(owned)

    async def count_for_user(self, user_id: str, category: str | None = None) -> int:
        return sum(
            1
            for p in self.store.projects.values()
            if p.user_id == user_id and (category is None or p.category == category)
        )

    async def add(self, project: Project) -> Project:
        apply_defaults(project)
        self.store.projects[project.id] = project
        self.store.prune()
        return project

    async def update(self, project: Project, **fields: Any) -> Project:
        for key, value in fields.items():
            setattr(project, key, value)
        project.updated_at = utcnow()
        return project

    async def transition(
        self,
        project_id: str,
        from_statuses: Iterable[str],
        to_status: str,
        **fields: Any,
    ) -> bool:
        project = self.store.projects.get(project_id)
        if project is None or project.status not in set(from_statuses):
            return False
        await self.update(project, status=to_status, **fields)
        return True

    async def delete(self, project: Project) -> None:
        self.store.drop_project(project.id)


class MemoryGenerationLogRepository:
    def __init__(self, store: DemoStore):
        self.store = store

    async def start_step(self, project_id: str, step: str, message: str) -> GenerationLog:
        log = apply_defaults(
            GenerationLog(
                id=self.store.next_id(),
                project_id=project_id,
                step=step,
                status=StepStatus.IN_PROGRESS.value,
                message=message,
                started_at=utcnow(),
            )
        )
        self.store.logs.append(log)
        self.store.prune()
        return log

    async def finish_step(
        self,
        log: GenerationLog,
        status: str,
        message: str,
        details: dict | None = None,
    ) -> GenerationLog:
        log.status = status
        log.message = message
        log.details = details
        log.completed_at = utcnow()
        return log

    async def list_for_project(self, project_id: str) -> list[GenerationLog]:
        logs = [log for log in self.store.logs if log.project_id == project_id]
        return sorted(logs, key=lambda log: (log.started_at, log.id))


class MemoryActivityRepository:
    def __init__(self, store: DemoStore):
        self.store = store

    async def append(self, entry: ProjectActivity) -> ProjectActivity:
        entry.id = self.store.next_id()
        self.store.activities.append(apply_defaults(entry))
        self.store.prune()
        return entry

    async def list_for_project(
        self,
        project_id: str,
        limit: int = 20,
        offset: int = 0,
        since: datetime | None = None,
    ) -> list[ProjectActivity]:
        entries = _newest_first(
            a
            for a in self.store.activities
            if a.project_id == project_id and (since is None or a.created_at >= since)
        )
        return entries[offset : offset + limit]

    async def list_for_user(
        self, user_id: str, since: datetime | None = None, limit: int | None = None
    ) -> list[ProjectActivity]:
        entries = _newest_first(
            a
            for a in self.store.activities
            if a.user_id == user_id and (since is None or a.created_at >= since)
        )
        return entries if limit is None else entries[:limit]


class MemoryShareRepository:
    def __init__(self, store: DemoStore):
        self.store = store

    async def get_for_owner(self, project_id: str, user_id: str) -> ProjectShare | None:
        for share in self.store.shares:
            if share.project_id == project_id and share.user_id == user_id:
                return share
        return None

    async def get_by_token(self, token: str) -> ProjectShare | None:
        for share in self.store.shares:
            if share.share_token == token:
                return share
        return None

    async def is_public(self, project_id: str) -> bool:
        return any(s.project_id == project_id and s.is_public for s in self.store.shares)

    async def save(self, share: ProjectShare) -> ProjectShare:
        if share.id is None:
            share.id = self.store.next_id()
            self.store.shares.append(apply_defaults(share))
            self.store.prune()
        else:
            share.updated_at = utcnow()
        return share

    async def delete(self, share: ProjectShare) -> None:
        self.store.shares = [s for s in self.store.shares if s.id != share.id]


class MemoryFavoriteRepository:
    def __init__(self, store: DemoStore):
        self.store = store

    async def exists(self, project_id: str, user_id: str) -> bool:
        return any(
            f.project_id == project_id and f.user_id == user_id for f in self.store.favorites
        )

    async def add(self, project_id: str, user_id: str) -> None:
        favorite = ProjectFavorite(id=self.store.next_id(), project_id=project_id, user_id=user_id)
        self.store.favorites.append(apply_defaults(favorite))
        self.store.prune()

    async def remove(self, project_id: str, user_id: str) -> None:
        self.store.favorites = [
            f
            for f in self.store.favorites
            if not (f.project_id == project_id and f.user_id == user_id)
        ]

    async def list_projects(self, user_id: str) -> list[Project]:
        favorites = _newest_first(f for f in self.store.favorites if f.user_id == user_id)
        return [
            self.store.projects[f.project_id]
            for f in favorites
            if f.project_id in self.store.projects
        ]

    async def count_for_user(self, user_id: str) -> int:
        return sum(1 for f in self.store.favorites if f.user_id == user_id)


class MemoryCategoryRepository:
    def __init__(self, store: DemoStore):
        self.store = store

    async def get(self, category_id: str) -> ProjectCategory | None:
        return self.store.categories.get(category_id)

    async def list_for_user(self, user_id: str) -> list[ProjectCategory]:
        owned = [c for c in self.store.categories.values() if c.created_by == user_id]
        return sorted(owned, key=lambda c: c.name)

    async def find_by_name(self, name: str, user_id: str) -> ProjectCategory | None:
        for category in self.store.categories.values():
            if category.name == name and category.created_by == user_id:
                return category
        return None

    async def add(self, category: ProjectCategory) -> ProjectCategory:
        self.store.categories[category.id] = apply_defaults(category)
        self.store.prune()
        return category

    async def update(self, category: ProjectCategory, **fields: Any) -> ProjectCategory:
        for key, value in fields.items():
            setattr(category, key, value)
        category.updated_at = utcnow()
        return category

    async def delete(self, category: ProjectCategory) -> None:
        self.store.categories.pop(category.id, None)


class MemoryTemplateRepository:
    def __init__(self, store: DemoStore):
        self.store = store

    async def get(self, template_id: str) -> ProjectTemplate | None:
        return self.store.templates.get(template_id)

    async def add(self, template: ProjectTemplate) -> ProjectTemplate:
        apply_defaults(template)
        self.store.templates[template.id] = template
        self.store.prune()
        return template

    async def increment_usage(self, template: ProjectTemplate) -> ProjectTemplate:
        template.usage_count = (template.usage_count or 0) + 1
        template.updated_at = utcnow()
        return template


class MemoryCollaboratorRepository:
    def __init__(self, store: DemoStore):
        self.store = store

    async def get(self, collaborator_id: int) -> ProjectCollaborator | None:
        for collaborator in self.store.collaborators:
            if collaborator.id == collaborator_id:
                return collaborator
        return None

    async def find(self, project_id: str, user_email: str) -> ProjectCollaborator | None:
        for collaborator in self.store.collaborators:
            if collaborator.project_id == project_id and collaborator.user_email == user_email:
                return collaborator
        return None

    async def list_for_project(self, project_id: str) -> list[ProjectCollaborator]:
        members = [c for c in self.store.collaborators if c.project_id == project_id]
        return sorted(members, key=lambda c: (c.joined_at, c.id))

    async def add(self, collaborator: ProjectCollaborator) -> ProjectCollaborator:
        collaborator.id = self.store.next_id()
        self.store.collaborators.append(apply_defaults(collaborator))
        self.store.prune()
        return collaborator

    async def update(
        self, collaborator: ProjectCollaborator, **fields: Any
    ) -> ProjectCollaborator:
        for key, value in fields.items():
            setattr(collaborator, key, value)
        collaborator.updated_at = utcnow()
        return collaborator

    async def delete(self, collaborator: ProjectCollaborator) -> None:
        self.store.collaborators = [
            c for c in self.store.collaborators if c.id != collaborator.id
        ]
