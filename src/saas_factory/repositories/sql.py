"""SQLAlchemy repository implementations.

Every write commits immediately: rows are independent transactions.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

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
from ..models.base import utcnow


class SqlProjectRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, project_id: str) -> Project | None:
        return await self.session.get(Project, project_id)

    async def list_for_user(
        self, user_id: str, offset: int = 0, limit: int | None = None
    ) -> tuple[list[Project], int]:
        query = (
            select(Project)
            .where(Project.user_id == user_id)
            .order_by(Project.created_at.desc())
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        total = await self.count_for_user(user_id)
        return list(result.scalars().all()), total

    async def count_for_user(self, user_id: str, category: str | None = None) -> int:
        query = select(func.count()).select_from(Project).where(Project.user_id == user_id)
        if category is not None:
            query = query.where(Project.category == category)
        return (await self.session.execute(query)).scalar_one()

    async def add(self, project: Project) -> Project:
        self.session.add(project)
        await self.session.commit()
        return project

    async def update(self, project: Project, **fields: Any) -> Project:
        for key, value in fields.items():
            setattr(project, key, value)
        await self.session.commit()
        return project

    async def transition(
        self,
        project_id: str,
        from_statuses: Iterable[str],
        to_status: str,
        **fields: Any,
    ) -> bool:
        stmt = (
            update(Project)
            .where(Project.id == project_id, Project.status.in_(list(from_statuses)))
            .values(status=to_status, updated_at=utcnow(), **fields)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        claimed = result.rowcount == 1
        if claimed:
            # The UPDATE bypasses loaded instances; reload the row into them
            await self.session.get(Project, project_id, populate_existing=True)
        return claimed

    async def delete(self, project: Project) -> None:
        await self.session.delete(project)
        await self.session.commit()


class SqlGenerationLogRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def start_step(self, project_id: str, step: str, message: str) -> GenerationLog:
        log = GenerationLog(
            project_id=project_id,
            step=step,
            status=StepStatus.IN_PROGRESS.value,
            message=message,
            started_at=utcnow(),
        )
        self.session.add(log)
        await self.session.commit()
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
        await self.session.commit()
        return log

    async def list_for_project(self, project_id: str) -> list[GenerationLog]:
        query = (
            select(GenerationLog)
            .where(GenerationLog.project_id == project_id)
            .order_by(GenerationLog.started_at.asc(), GenerationLog.id.asc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())


class SqlActivityRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, entry: ProjectActivity) -> ProjectActivity:
        # Savepoint keeps a failed insert from poisoning the caller's session
        async with self.session.begin_nested():
            self.session.add(entry)
        await self.session.commit()
        return entry

    async def list_for_project(
        self,
        project_id: str,
        limit: int = 20,
        offset: int = 0,
        since: datetime | None = None,
    ) -> list[ProjectActivity]:
        query = select(ProjectActivity).where(ProjectActivity.project_id == project_id)
        if since is not None:
            query = query.where(ProjectActivity.created_at >= since)
        query = (
            query.order_by(ProjectActivity.created_at.desc(), ProjectActivity.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_for_user(
        self, user_id: str, since: datetime | None = None, limit: int | None = None
    ) -> list[ProjectActivity]:
        query = select(ProjectActivity).where(ProjectActivity.user_id == user_id)
        if since is not None:
            query = query.where(ProjectActivity.created_at >= since)
        query = query.order_by(ProjectActivity.created_at.desc(), ProjectActivity.id.desc())
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())


class SqlShareRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_owner(self, project_id: str, user_id: str) -> ProjectShare | None:
        query = select(ProjectShare).where(
            ProjectShare.project_id == project_id, ProjectShare.user_id == user_id
        )
        return (await self.session.execute(query)).scalar_one_or_none()

    async def get_by_token(self, token: str) -> ProjectShare | None:
        query = select(ProjectShare).where(ProjectShare.share_token == token)
        return (await self.session.execute(query)).scalar_one_or_none()

    async def is_public(self, project_id: str) -> bool:
        query = select(func.count()).select_from(ProjectShare).where(
            ProjectShare.project_id == project_id, ProjectShare.is_public.is_(True)
        )
        return (await self.session.execute(query)).scalar_one() > 0

    async def save(self, share: ProjectShare) -> ProjectShare:
        self.session.add(share)
        await self.session.commit()
        return share

    async def delete(self, share: ProjectShare) -> None:
        await self.session.delete(share)
        await self.session.commit()


class SqlFavoriteRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, project_id: str, user_id: str) -> bool:
        query = select(func.count()).select_from(ProjectFavorite).where(
            ProjectFavorite.project_id == project_id, ProjectFavorite.user_id == user_id
        )
        return (await self.session.execute(query)).scalar_one() > 0

    async def add(self, project_id: str, user_id: str) -> None:
        self.session.add(ProjectFavorite(project_id=project_id, user_id=user_id))
        await self.session.commit()

    async def remove(self, project_id: str, user_id: str) -> None:
        await self.session.execute(
            delete(ProjectFavorite).where(
                ProjectFavorite.project_id == project_id, ProjectFavorite.user_id == user_id
            )
        )
        await self.session.commit()

    async def list_projects(self, user_id: str) -> list[Project]:
        query = (
            select(Project)
            .join(ProjectFavorite, ProjectFavorite.project_id == Project.id)
            .where(ProjectFavorite.user_id == user_id)
            .order_by(ProjectFavorite.created_at.desc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_for_user(self, user_id: str) -> int:
        query = select(func.count()).select_from(ProjectFavorite).where(
            ProjectFavorite.user_id == user_id
        )
        return (await self.session.execute(query)).scalar_one()


class SqlCategoryRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, category_id: str) -> ProjectCategory | None:
        return await self.session.get(ProjectCategory, category_id)

    async def list_for_user(self, user_id: str) -> list[ProjectCategory]:
        query = (
            select(ProjectCategory)
            .where(ProjectCategory.created_by == user_id)
            .order_by(ProjectCategory.name.asc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_by_name(self, name: str, user_id: str) -> ProjectCategory | None:
        query = select(ProjectCategory).where(
            ProjectCategory.name == name, ProjectCategory.created_by == user_id
        )
        return (await self.session.execute(query)).scalars().first()

    async def add(self, category: ProjectCategory) -> ProjectCategory:
        self.session.add(category)
        await self.session.commit()
        return category

    async def update(self, category: ProjectCategory, **fields: Any) -> ProjectCategory:
        for key, value in fields.items():
            setattr(category, key, value)
        await self.session.commit()
        return category

    async def delete(self, category: ProjectCategory) -> None:
        await self.session.delete(category)
        await self.session.commit()


class SqlTemplateRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, template_id: str) -> ProjectTemplate | None:
        return await self.session.get(ProjectTemplate, template_id)

    async def add(self, template: ProjectTemplate) -> ProjectTemplate:
        self.session.add(template)
        await self.session.commit()
        return template

    async def increment_usage(self, template: ProjectTemplate) -> ProjectTemplate:
        await self.session.execute(
            update(ProjectTemplate)
            .where(ProjectTemplate.id == template.id)
            .values(usage_count=ProjectTemplate.usage_count + 1, updated_at=utcnow())
        )
        await self.session.commit()
        await self.session.refresh(template)
        return template


class SqlCollaboratorRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, collaborator_id: int) -> ProjectCollaborator | None:
        return await self.session.get(ProjectCollaborator, collaborator_id)

    async def find(self, project_id: str, user_email: str) -> ProjectCollaborator | None:
        query = select(ProjectCollaborator).where(
            ProjectCollaborator.project_id == project_id,
            ProjectCollaborator.user_email == user_email,
        )
        return (await self.session.execute(query)).scalar_one_or_none()

    async def list_for_project(self, project_id: str) -> list[ProjectCollaborator]:
        query = (
            select(ProjectCollaborator)
            .where(ProjectCollaborator.project_id == project_id)
            .order_by(ProjectCollaborator.joined_at.asc(), ProjectCollaborator.id.asc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def add(self, collaborator: ProjectCollaborator) -> ProjectCollaborator:
        self.session.add(collaborator)
        await self.session.commit()
        return collaborator

    async def update(
        self, collaborator: ProjectCollaborator, **fields: Any
    ) -> ProjectCollaborator:
        for key, value in fields.items():
            setattr(collaborator, key, value)
        await self.session.commit()
        return collaborator

    async def delete(self, collaborator: ProjectCollaborator) -> None:
        await self.session.delete(collaborator)
        await self.session.commit()
