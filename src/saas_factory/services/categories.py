"""Project categories: built-in system categories plus per-user custom ones."""

import uuid

from ..backends import DataBackend
from ..catalog import SYSTEM_CATEGORIES, SYSTEM_CATEGORY_IDS
from ..errors import Conflict, NotFound, PermissionDenied, ValidationError
from ..identity import CurrentUser
from ..logging import get_logger
from ..models import ProjectCategory
from ..schemas.category import CategoryCreate, CategoryRead, CategoryUpdate

logger = get_logger(__name__)


def _system_read(category: dict) -> CategoryRead:
    return CategoryRead(is_system=True, **category)


def _custom_read(category: ProjectCategory) -> CategoryRead:
    return CategoryRead(
        id=category.id,
        name=category.name,
        description=category.description,
        color=category.color,
        is_system=False,
        created_by=category.created_by,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


class CategoryService:
    def __init__(self, backend: DataBackend):
        self.backend = backend

    async def list_categories(
        self, user: CurrentUser, include_stats: bool = False
    ) -> list[CategoryRead]:
        """System categories first, then the caller's own sorted by name."""
        custom = await self.backend.categories.list_for_user(user.id)
        categories = [_system_read(c) for c in SYSTEM_CATEGORIES]
        categories += [_custom_read(c) for c in sorted(custom, key=lambda c: c.name)]
        if include_stats:
            for category in categories:
                category.project_count = await self.backend.projects.count_for_user(
                    user.id, category=category.id
                )
        return categories

    async def _name_taken(
        self, name: str, user: CurrentUser, exclude_id: str | None = None
    ) -> bool:
        if any(c["name"].lower() == name.lower() for c in SYSTEM_CATEGORIES):
            return True
        existing = await self.backend.categories.find_by_name(name, user.id)
        return existing is not None and existing.id != exclude_id

    async def create(self, user: CurrentUser, data: CategoryCreate) -> CategoryRead:
        name = (data.name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        if await self._name_taken(name, user):
            raise Conflict("A category with this name already exists")

        category = ProjectCategory(
            id=f"custom-{uuid.uuid4().hex[:12]}",
            name=name,
            description=data.description,
            color=data.color,
            is_system=False,
            created_by=user.id,
        )
        await self.backend.categories.add(category)
        logger.info("category_created", category_id=category.id)
        return _custom_read(category)

    async def _owned(self, category_id: str, user: CurrentUser) -> ProjectCategory:
        if category_id in SYSTEM_CATEGORY_IDS:
            raise PermissionDenied("System categories cannot be changed")
        category = await self.backend.categories.get(category_id)
        if category is None:
            raise NotFound("Category not found")
        if category.is_system:
            raise PermissionDenied("System categories cannot be changed")
        if category.created_by != user.id:
            raise PermissionDenied("You can only change your own categories")
        return category

    async def update(
        self, category_id: str, user: CurrentUser, data: CategoryUpdate
    ) -> CategoryRead:
        category = await self._owned(category_id, user)
        fields = data.model_dump(exclude_none=True)
        if "name" in fields:
            fields["name"] = fields["name"].strip()
            if not fields["name"]:
                raise ValidationError("Category name is required")
            if await self._name_taken(fields["name"], user, exclude_id=category.id):
                raise Conflict("A category with this name already exists")
        if fields:
            await self.backend.categories.update(category, **fields)
            logger.info("category_updated", category_id=category.id, fields=sorted(fields))
        return _custom_read(category)

    async def delete(self, category_id: str, user: CurrentUser) -> None:
        category = await self._owned(category_id, user)
        in_use = await self.backend.projects.count_for_user(user.id, category=category.id)
        if in_use:
            raise Conflict(
                f"Category is used by {in_use} project(s)",
                projects_count=in_use,
            )
        await self.backend.categories.delete(category)
        logger.info("category_deleted", category_id=category.id)
