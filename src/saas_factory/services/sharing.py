"""Share links and token-based access."""

import secrets

from ..backends import DataBackend
from ..errors import NotFound, PermissionDenied, ValidationError
from ..identity import CurrentUser
from ..logging import get_logger
from ..models import Project, ProjectShare
from ..schemas.share import ShareSettings, ShareUpdate
from .activity import ActivityLog
from .lifecycle import ProjectLifecycle

logger = get_logger(__name__)


def new_share_token() -> str:
    return secrets.token_urlsafe(32)


def _normalize_emails(emails: list[str]) -> list[str]:
    return sorted({email.strip().lower() for email in emails if email.strip()})


class ShareService:
    def __init__(self, backend: DataBackend, lifecycle: ProjectLifecycle):
        self.backend = backend
        self.lifecycle = lifecycle
        self.activity = ActivityLog(backend.activities)

    async def get(self, project_id: str, user: CurrentUser) -> ProjectShare | None:
        project = await self.lifecycle.get_owned(project_id, user)
        return await self.backend.shares.get_for_owner(project.id, user.id)

    async def share(
        self, project_id: str, user: CurrentUser, settings: ShareSettings
    ) -> ProjectShare:
        """Create or replace the share setting. Always issues a fresh token."""
        project = await self.lifecycle.get_owned(project_id, user)
        share = await self.backend.shares.get_for_owner(project.id, user.id)
        if share is None:
            share = ProjectShare(project_id=project.id, user_id=user.id)
        share.share_token = new_share_token()
        share.is_public = settings.is_public
        share.allowed_emails = _normalize_emails(settings.allowed_emails)
        await self.backend.shares.save(share)

        logger.info("project_shared", project_id=project.id, is_public=share.is_public)
        await self.activity.record(
            project.id,
            user.id,
            "project_shared",
            f'Project "{project.title}" was shared',
            {"is_public": share.is_public, "allowed_emails_count": len(share.allowed_emails)},
        )
        return share

    async def update(self, project_id: str, user: CurrentUser, data: ShareUpdate) -> ProjectShare:
        """Change visibility or the email list. The token is kept."""
        project = await self.lifecycle.get_owned(project_id, user)
        share = await self.backend.shares.get_for_owner(project.id, user.id)
        if share is None:
            raise NotFound("Share settings not found")
        if data.is_public is not None:
            share.is_public = data.is_public
        if data.allowed_emails is not None:
            share.allowed_emails = _normalize_emails(data.allowed_emails)
        await self.backend.shares.save(share)
        logger.info("share_updated", project_id=project.id, is_public=share.is_public)
        return share

    async def unshare(self, project_id: str, user: CurrentUser) -> None:
        project = await self.lifecycle.get_owned(project_id, user)
        share = await self.backend.shares.get_for_owner(project.id, user.id)
        if share is None:
            return
        await self.backend.shares.delete(share)
        logger.info("project_unshared", project_id=project.id)
        await self.activity.record(
            project.id, user.id, "project_unshared", f'Sharing of "{project.title}" was stopped'
        )

    async def _lookup(self, token: str) -> tuple[ProjectShare, Project]:
        share = await self.backend.shares.get_by_token(token)
        if share is None:
            raise NotFound("Shared project not found")
        project = await self.backend.projects.get(share.project_id)
        if project is None:
            raise NotFound("Shared project not found")
        return share, project

    async def resolve(self, token: str, caller_email: str | None = None) -> Project:
        """Return the project behind a token if the caller may see it.

        Raises:
            NotFound: Unknown token
            ValidationError: Private share and no email supplied
            PermissionDenied: Private share and the email is not allowed
        """
        share, project = await self._lookup(token)
        if share.is_public:
            return project
        if not caller_email:
            raise ValidationError("An email address is required to view this project")
        if caller_email.strip().lower() not in share.allowed_emails:
            logger.warning("share_access_denied", project_id=project.id)
            raise PermissionDenied("You do not have access to this project")
        return project

    async def preview(self, token: str) -> tuple[Project | None, str]:
        """Public projects resolve directly; private ones expose only their title."""
        share, project = await self._lookup(token)
        if share.is_public:
            return project, project.title
        return None, project.title
