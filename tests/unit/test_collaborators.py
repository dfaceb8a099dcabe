"""Tests for project collaborators."""

import pydantic
import pytest

from saas_factory.backends import DemoBackend
from saas_factory.errors import Conflict, NotFound, PermissionDenied, ValidationError
from saas_factory.identity import DEMO_USER, CurrentUser
from saas_factory.schemas import CollaboratorInvite, CollaboratorRoleUpdate, ProjectCreate
from saas_factory.services.activity import ActivityLog
from saas_factory.services.collaborators import CollaboratorService
from saas_factory.services.lifecycle import ProjectLifecycle


@pytest.fixture
def lifecycle(live_backend, settings):
    return ProjectLifecycle(live_backend, settings)


@pytest.fixture
def collaborators(live_backend):
    return CollaboratorService(live_backend)


@pytest.fixture
async def project(lifecycle, user):
    return await lifecycle.create(user, ProjectCreate(title="Team CRM"))


@pytest.fixture
async def invited(collaborators, project, user, other_user):
    return await collaborators.invite(
        project.id, user, CollaboratorInvite(user_email=other_user.email, role="editor")
    )


@pytest.mark.asyncio
async def test_owner_is_listed_first(collaborators, project, user):
    await collaborators.invite(
        project.id, user, CollaboratorInvite(user_email=" Dev@Example.com ", role="viewer")
    )

    members = await collaborators.list_collaborators(project.id, user)

    assert [m.role for m in members] == ["owner", "viewer"]
    assert members[0].is_owner is True
    assert members[0].user_id == user.id
    assert members[0].user_email == user.email
    assert members[1].user_email == "dev@example.com"
    assert members[1].invited_by == user.id


@pytest.mark.asyncio
async def test_invite_records_activity(collaborators, live_backend, project, invited):
    entries = await ActivityLog(live_backend.activities).list_entries(project.id)

    assert entries[0].action == "collaborator_invited"
    assert entries[0].metadata_ == {"user_email": "other@example.com", "role": "editor"}


@pytest.mark.asyncio
@pytest.mark.parametrize("email", ["", "   ", None, "OWNER@example.com"])
async def test_invite_rejects_missing_or_owner_email(collaborators, project, user, email):
    with pytest.raises(ValidationError):
        await collaborators.invite(project.id, user, CollaboratorInvite(user_email=email))


@pytest.mark.asyncio
async def test_duplicate_invite_conflicts(collaborators, project, user, invited):
    with pytest.raises(Conflict):
        await collaborators.invite(
            project.id, user, CollaboratorInvite(user_email="Other@Example.com")
        )


def test_owner_role_cannot_be_handed_out():
    with pytest.raises(pydantic.ValidationError):
        CollaboratorInvite(user_email="a@example.com", role="owner")


@pytest.mark.asyncio
async def test_collaborator_can_list_but_not_manage(collaborators, project, invited, other_user):
    members = await collaborators.list_collaborators(project.id, other_user)

    assert len(members) == 2  # noqa: PLR2004
    assert members[0].user_email is None
    with pytest.raises(PermissionDenied):
        await collaborators.invite(
            project.id, other_user, CollaboratorInvite(user_email="third@example.com")
        )
    with pytest.raises(PermissionDenied):
        await collaborators.remove(project.id, other_user, invited.id)


@pytest.mark.asyncio
async def test_stranger_cannot_see_project(collaborators, project, invited):
    stranger = CurrentUser(id="user-3", email="stranger@example.com")

    with pytest.raises(NotFound):
        await collaborators.list_collaborators(project.id, stranger)
    with pytest.raises(NotFound):
        await collaborators.list_collaborators(project.id, CurrentUser(id="user-4"))


@pytest.mark.asyncio
async def test_update_role(collaborators, live_backend, project, user, invited):
    updated = await collaborators.update_role(
        project.id, user, CollaboratorRoleUpdate(collaborator_id=invited.id, role="viewer")
    )

    assert updated.role == "viewer"
    entries = await ActivityLog(live_backend.activities).list_entries(project.id)
    assert entries[0].action == "collaborator_role_changed"
    assert entries[0].metadata_["old_role"] == "editor"


@pytest.mark.asyncio
async def test_collaborator_of_another_project_is_not_found(
    collaborators, lifecycle, user, invited
):
    other_project = await lifecycle.create(user, ProjectCreate(title="Other"))
    change = CollaboratorRoleUpdate(collaborator_id=invited.id, role="viewer")

    with pytest.raises(NotFound):
        await collaborators.update_role(other_project.id, user, change)
    with pytest.raises(NotFound):
        await collaborators.remove(other_project.id, user, invited.id)


@pytest.mark.asyncio
async def test_remove(collaborators, live_backend, project, user, invited, other_user):
    await collaborators.remove(project.id, user, invited.id)

    members = await collaborators.list_collaborators(project.id, user)
    assert [m.role for m in members] == ["owner"]
    with pytest.raises(NotFound):
        await collaborators.list_collaborators(project.id, other_user)
    entries = await ActivityLog(live_backend.activities).list_entries(project.id)
    assert entries[0].action == "collaborator_removed"


class TestDemoCollaborators:
    @pytest.mark.asyncio
    async def test_seeded_collaborator_is_listed(self, demo_store):
        service = CollaboratorService(DemoBackend(demo_store))

        members = await service.list_collaborators("demo-project-1", DEMO_USER)

        assert [m.user_email for m in members] == [
            DEMO_USER.email,
            "designer@saas-factory.com",
        ]

    @pytest.mark.asyncio
    async def test_deleting_a_project_drops_its_collaborators(self, demo_store, settings):
        backend = DemoBackend(demo_store)
        service = CollaboratorService(backend)
        await service.invite(
            "demo-project-1", DEMO_USER, CollaboratorInvite(user_email="new@example.com")
        )

        await ProjectLifecycle(backend, settings).delete("demo-project-1", DEMO_USER)

        assert not [c for c in demo_store.collaborators if c.project_id == "demo-project-1"]
