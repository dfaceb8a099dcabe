"""Tests for the in-memory demo store and repositories."""

from datetime import datetime, timezone

import pytest

from saas_factory.demo_data import DEMO_PROJECTS, DEMO_USER_ID
from saas_factory.models import Project, ProjectActivity
from saas_factory.repositories import DemoStore, get_demo_store
from saas_factory.repositories.memory import (
    MemoryActivityRepository,
    MemoryGenerationLogRepository,
    MemoryProjectRepository,
    apply_defaults,
)


def test_seeded_projects():
    store = DemoStore()

    assert set(store.projects) == {p["id"] for p in DEMO_PROJECTS}
    assert store.projects["demo-project-3"].status == "draft"
    assert all(log.id is not None for log in store.logs)


def test_apply_defaults_fills_columns():
    project = apply_defaults(Project(user_id="u", title="t"))

    assert project.id
    assert project.status == "draft"
    assert project.category == "other"
    assert project.created_at is not None


def test_store_is_shared():
    assert get_demo_store() is get_demo_store()


@pytest.mark.asyncio
async def test_transition_is_conditional():
    repo = MemoryProjectRepository(DemoStore())

    assert await repo.transition("demo-project-3", ["draft", "error"], "generating")
    assert not await repo.transition("demo-project-3", ["draft", "error"], "generating")
    assert not await repo.transition("missing", ["draft"], "generating")


@pytest.mark.asyncio
async def test_list_for_user_pages():
    repo = MemoryProjectRepository(DemoStore())

    page, total = await repo.list_for_user(DEMO_USER_ID, offset=1, limit=1)

    assert total == len(DEMO_PROJECTS)
    assert len(page) == 1


@pytest.mark.asyncio
async def test_reset_discards_writes(demo_store):
    await MemoryProjectRepository(demo_store).add(Project(user_id=DEMO_USER_ID, title="New"))

    demo_store.reset()

    assert len(demo_store.projects) == len(DEMO_PROJECTS)


@pytest.mark.asyncio
async def test_activities_newest_first(demo_store):
    repo = MemoryActivityRepository(demo_store)
    for action in ("first", "second", "third"):
        await repo.append(
            ProjectActivity(
                project_id="demo-project-1", user_id=DEMO_USER_ID, action=action, description=""
            )
        )

    entries = await repo.list_for_project("demo-project-1", limit=2)

    assert [e.action for e in entries] == ["third", "second"]


@pytest.mark.asyncio
async def test_visitor_projects_are_capped():
    store = DemoStore(max_rows=2)
    repo = MemoryProjectRepository(store)
    added = [
        await repo.add(
            Project(
                user_id=DEMO_USER_ID,
                title=f"p{i}",
                created_at=datetime(2026, 1, 1, 0, 0, i, tzinfo=timezone.utc),
            )
        )
        for i in range(4)
    ]

    seeded = {p["id"] for p in DEMO_PROJECTS}
    assert set(store.projects) - seeded == {added[2].id, added[3].id}
    assert seeded <= set(store.projects)


@pytest.mark.asyncio
async def test_visitor_rows_are_capped_and_seeded_logs_kept():
    store = DemoStore(max_rows=3)
    seeded_logs = len(store.logs)
    activities = MemoryActivityRepository(store)
    logs = MemoryGenerationLogRepository(store)

    for i in range(5):
        await activities.append(
            ProjectActivity(
                project_id="demo-project-1", user_id=DEMO_USER_ID, action=f"a{i}", description=""
            )
        )
        await logs.start_step("demo-project-3", "analyze", "Analyzing requirements")

    assert [a.action for a in store.activities] == ["a2", "a3", "a4"]
    assert len(store.logs) == seeded_logs + 3
