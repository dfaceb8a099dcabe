"""Pydantic schemas for API requests and responses."""

from .activity import ActivityRead
from .category import CategoryCreate, CategoryRead, CategoryUpdate
from .collaborator import CollaboratorInvite, CollaboratorRead, CollaboratorRoleUpdate
from .common import ApiResponse, ErrorResponse
from .deploy import (
    DeploymentResult,
    EnvVar,
    OneClickDeployRequest,
    VercelDeployRequest,
    VercelDeployResult,
)
from .progress import ProgressEvent, ProgressEventType, StepState
from .project import (
    CloneRequest,
    CloneSettings,
    FavoriteStatus,
    GenerateRequest,
    GenerationLogRead,
    GenerationStatus,
    ProjectCreate,
    ProjectDetail,
    ProjectFields,
    ProjectPage,
    ProjectRead,
    ProjectUpdate,
)
from .share import ShareAccessRequest, SharedProject, ShareRead, ShareSettings, ShareUpdate
from .template import TemplateCreate, TemplateCustomization, TemplateRead, TemplateUseRequest

__all__ = [
    "ActivityRead",
    "ApiResponse",
    "CategoryCreate",
    "CategoryRead",
    "CategoryUpdate",
    "CloneRequest",
    "CloneSettings",
    "CollaboratorInvite",
    "CollaboratorRead",
    "CollaboratorRoleUpdate",
    "DeploymentResult",
    "EnvVar",
    "ErrorResponse",
    "FavoriteStatus",
    "GenerateRequest",
    "GenerationLogRead",
    "GenerationStatus",
    "OneClickDeployRequest",
    "ProgressEvent",
    "ProgressEventType",
    "ProjectCreate",
    "ProjectDetail",
    "ProjectFields",
    "ProjectPage",
    "ProjectRead",
    "ProjectUpdate",
    "ShareAccessRequest",
    "ShareRead",
    "ShareSettings",
    "ShareUpdate",
    "SharedProject",
    "StepState",
    "TemplateCreate",
    "TemplateCustomization",
    "TemplateRead",
    "TemplateUseRequest",
    "VercelDeployRequest",
    "VercelDeployResult",
]
