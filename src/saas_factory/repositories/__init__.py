"""Repositories package."""

from .base import (
    ActivityRepository,
    CategoryRepository,
    CollaboratorRepository,
    FavoriteRepository,
    GenerationLogRepository,
    ProjectRepository,
    ShareRepository,
    TemplateRepository,
)
from .memory import DemoStore, get_demo_store

__all__ = [
    "ActivityRepository",
    "CategoryRepository",
    "CollaboratorRepository",
    "DemoStore",
    "FavoriteRepository",
    "GenerationLogRepository",
    "ProjectRepository",
    "ShareRepository",
    "TemplateRepository",
    "get_demo_store",
]
