"""Database models package."""

from .activity import ProjectActivity
from .base import Base
from .category import ProjectCategory
from .collaborator import INVITABLE_ROLES, CollaboratorRole, ProjectCollaborator
from .favorite import ProjectFavorite
from .generation_log import GenerationLog, GenerationStep, StepStatus
from .project import GENERATABLE_STATUSES, Project, ProjectStatus
from .share import ProjectShare
from .template import ProjectTemplate

__all__ = [
    "Base",
    "CollaboratorRole",
    "GENERATABLE_STATUSES",
    "GenerationLog",
    "GenerationStep",
    "INVITABLE_ROLES",
    "Project",
    "ProjectActivity",
    "ProjectCategory",
    "ProjectCollaborator",
    "ProjectFavorite",
    "ProjectShare",
    "ProjectStatus",
    "ProjectTemplate",
    "StepStatus",
]
