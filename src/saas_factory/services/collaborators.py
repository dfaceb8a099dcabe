"""Project collaborators invited by email."""

from ..backends import DataBackend
from ..errors import Conflict, NotFound, PermissionDenied, ValidationError
from ..identity import CurrentUser
from ..logging import get_logger
from ..models import CollaboratorRole, Project, ProjectCollaborator
from ..models.base import utcnow
from ..schemas.collaborator import CollaboratorInvite, CollaboratorRead, CollaboratorRoleUpdate
from .activity import ActivityLog

logger = get_logger(__name__)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


class CollaboratorService:
    def __init__(self, backend: DataBackend):
        self.backend = backend
        self.activity = ActivityLog(backend.activities)

    async def _load(self, project_id: str, user: CurrentUser) -> tuple[Project, bool]:
        """Return the project and whether the caller owns it.

        Callers who are neither the owner nor a collaborator get NotFound.
        """
        project = await self.backend.projects.get(project_id)
        if project is None:
            raise NotFound("Project not found")
        if self.backend.is_demo or project.user_id == user.id:
            return project, True
        email = normalize_email(user.email)
        if email and await self.backend.collaborators.find(project.id, email):
            return project, False
        logger.warning("project_access_denied", project_id=project_id, user_id=user.id)
        raise NotFound("Project not found")

    async def _owned(self, project_id: str, user: CurrentUser) -> Project:
        project, is_owner = await self._load(project_id, user)
        if not is_owner:
            raise PermissionDenied("Only the project owner can manage collaborators")
        return project

    async def _member(self, project: Project, collaborator_id: int) -> ProjectCollaborator:
        collaborator = await self.backend.collaborators.get(collaborator_id)
        if collaborator is None or collaborator.project_id != project.id:
            raise NotFound("Collaborator not found")
        return collaborator

    async def list_collaborators(
        self, project_id: str, user: CurrentUser
    ) -> list[CollaboratorRead]:
        """Owner first, then collaborators in invitation order."""
        project, is_owner = await self._load(project_id, user)
        owner = CollaboratorRead(
            project_id=project.id,
            user_id=project.user_id,
            user_email=user.email if is_owner else None,
            role=CollaboratorRole.OWNER.value,
            joined_at=project.created_at,
            is_owner=True,
        )
        members = await self.backend.collaborators.list_for_project(project.id)
        return [owner, *(CollaboratorRead.model_validate(m) for m in members)]

    async def invite(
        self, project_id: str, user: CurrentUser, data: CollaboratorInvite
    ) -> ProjectCollaborator:
        project = await self._owned(project_id, user)
        email = normalize_email(data.user_email)
        if not email:
            raise ValidationError("An email address is required")
        if email == normalize_email(user.email):
            raise ValidationError("The project owner cannot be invited as a collaborator")
        if await self.backend.collaborators.find(project.id, email):
            raise Conflict("This user is already a collaborator")

        collaborator = await self.backend.collaborators.add(
            ProjectCollaborator(
                project_id=project.id,
                user_email=email,
                role=data.role,
                invited_by=user.id,
                joined_at=utcnow(),
            )
        )
        logger.info("collaborator_invited", project_id=project.id, role=data.role)
        await self.activity.record(
            project.id,
            user.id,
            "collaborator_invited",
            f'{email} was invited to "{project.title}" as {data.role}',
            {"user_email": email, "role": data.role},
        )
        return collaborator

    async def update_role(
        self, project_id: str, user: CurrentUser, data: CollaboratorRoleUpdate
    ) -> ProjectCollaborator:
        project = await self._owned(project_id, user)
        collaborator = await self._member(project, data.collaborator_id)
        previous = collaborator.role
        await self.backend.collaborators.update(collaborator, role=data.role)
        logger.info(
            "collaborator_role_changed",
            project_id=project.id,
            collaborator_id=collaborator.id,
            role=data.role,
        )
        await self.activity.record(
            project.id,
            user.id,
            "collaborator_role_changed",
            f"{collaborator.user_email} is now {data.role}",
            {"user_email": collaborator.user_email, "old_role": previous, "new_role": data.role},
        )
        return collaborator

    async def remove(self, project_id: str, user: CurrentUser, collaborator_id: int) -> None:
        project = await self._owned(project_id, user)
        collaborator = await self._member(project, collaborator_id)
        email = collaborator.user_email
        await self.backend.collaborators.delete(collaborator)
        logger.info("collaborator_removed", project_id=project.id, collaborator_id=collaborator_id)
        await self.activity.record(
            project.id,
            user.id,
            "collaborator_removed",
            f'{email} was removed from "{project.title}"',
            {"user_email": email},
        )
