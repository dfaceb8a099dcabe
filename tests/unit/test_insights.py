"""Tests for analytics and monitoring aggregation."""

from datetime import UTC, datetime, timedelta
import random

import pytest

from saas_factory.backends import DemoBackend
from saas_factory.errors import ValidationError
from saas_factory.identity import DEMO_USER
from saas_factory.models import Project, ProjectActivity
from saas_factory.models.base import utcnow
from saas_factory.schemas import ProjectCreate
from saas_factory.services.analytics import (
    AnalyticsService,
    TimeRange,
    activity_timeline,
    breakdown,
    complexity_score,
    insights,
    performance_analysis,
    project_metrics,
    trends,
)
from saas_factory.services.favorites import FavoriteService
from saas_factory.services.lifecycle import ProjectLifecycle
from saas_factory.services.monitoring import (
    Metric,
    MonitoringService,
    SyntheticMetrics,
    activity_metrics,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def activity(action: str, at: datetime, entry_id: int = 1) -> ProjectActivity:
    return ProjectActivity(
        id=entry_id,
        project_id="p1",
        user_id="user-1",
        action=action,
        description=action,
        created_at=at,
        updated_at=at,
    )


class TestAnalyticsHelpers:
    def test_breakdown_percentages(self):
        result = breakdown(["crm", "crm", "blog", "other"])

        assert result[0] == ("crm", 2, 50.0)
        assert sum(count for _, count, _ in result) == 4  # noqa: PLR2004

    def test_timeline_has_one_entry_per_day(self):
        entries = [
            activity("project_created", NOW),
            activity("project_updated", NOW - timedelta(days=1)),
            activity("project_updated", NOW - timedelta(days=1, hours=2)),
        ]

        timeline = activity_timeline(entries, 7, NOW.date())

        assert len(timeline) == 7  # noqa: PLR2004
        assert timeline[-1] == {"date": "2026-03-10", "count": 1}
        assert timeline[-2] == {"date": "2026-03-09", "count": 2}
        assert timeline[0]["count"] == 0

    def test_trends_growth_against_previous_period(self):
        entries = [
            activity("project_created", NOW - timedelta(days=1)),
            activity("project_completed", NOW - timedelta(days=2)),
            activity("project_deployed", NOW - timedelta(days=3)),
            activity("project_created", NOW - timedelta(days=9)),
            activity("project_created", NOW - timedelta(days=10)),
        ]

        result = trends(entries, timedelta(days=7), NOW)

        assert result["projects_created_this_period"] == 1
        assert result["projects_completed_this_period"] == 1
        assert result["deployments_this_period"] == 1
        assert result["growth_rate"] == 50.0  # noqa: PLR2004

    def test_trends_without_history(self):
        assert trends([], timedelta(days=7), NOW)["growth_rate"] == 0.0
        current = [activity("project_created", NOW)]
        assert trends(current, timedelta(days=7), NOW)["growth_rate"] == 100.0  # noqa: PLR2004

    def test_time_range_periods(self):
        assert TimeRange("7d").timeline_days == 7  # noqa: PLR2004
        assert TimeRange("1y").period == timedelta(days=365)
        assert TimeRange("all").period == timedelta(days=30)


class TestAnalyticsOverview:
    @pytest.mark.asyncio
    async def test_overview_counts(self, live_backend, settings, user, other_user):
        lifecycle = ProjectLifecycle(live_backend, settings)
        crm = await lifecycle.create(user, ProjectCreate(title="CRM", category="crm"))
        await lifecycle.create(user, ProjectCreate(title="Blog", category="blog"))
        await lifecycle.create(other_user, ProjectCreate(title="Not mine", category="crm"))
        await lifecycle.generate(crm.id, user)
        await FavoriteService(live_backend, lifecycle).add(crm.id, user)

        data = await AnalyticsService(live_backend).overview(user, TimeRange.WEEK)

        assert data["overview"] == {
            "total_projects": 2,
            "active_projects": 1,
            "completed_projects": 1,
            "deployed_projects": 0,
            "favorite_projects": 1,
        }
        assert data["trends"]["projects_created_this_period"] == 2  # noqa: PLR2004
        assert data["trends"]["projects_completed_this_period"] == 1
        statuses = {s["status"]: s for s in data["status_breakdown"]}
        assert statuses["completed"]["color"] == "#10B981"
        assert statuses["draft"]["percentage"] == 50.0  # noqa: PLR2004
        assert {c["name"] for c in data["category_breakdown"]} == {"CRM", "Blog"}
        assert len(data["activity_timeline"]) == 7  # noqa: PLR2004
        assert data["activity_timeline"][-1]["count"] >= 4  # noqa: PLR2004

    @pytest.mark.asyncio
    async def test_empty_overview(self, live_backend, user):
        data = await AnalyticsService(live_backend).overview(user, TimeRange.ALL)

        assert data["overview"]["total_projects"] == 0
        assert data["status_breakdown"] == []
        assert len(data["activity_timeline"]) == 90  # noqa: PLR2004


def project_row(
    status: str = "draft",
    category: str = "other",
    features: str = "",
    tech_requirements: str = "",
    created_at: datetime = NOW,
    updated_at: datetime | None = None,
    completed_at: datetime | None = None,
) -> Project:
    return Project(
        id="p1",
        user_id="user-1",
        title="Row",
        status=status,
        category=category,
        features=features,
        tech_requirements=tech_requirements,
        created_at=created_at,
        updated_at=updated_at or created_at,
        completed_at=completed_at,
    )


def entry(status: str, duration_days: int, complexity: float = 1.0, category: str = "crm"):
    return {
        "id": f"{status}-{duration_days}",
        "status": status,
        "category": category,
        "metrics": {"duration_days": duration_days, "complexity_score": complexity},
    }


class TestProjectMetrics:
    def test_complexity_from_features_tech_and_category(self):
        project = project_row(
            category="crm",
            features="- a\n- b\n\n- c\n- d\n- e",
            tech_requirements="- CSV export\n- Backups",
        )

        assert complexity_score(project) == 3.1  # noqa: PLR2004

    def test_complexity_is_capped(self):
        many = "\n".join(f"- item {i}" for i in range(20))
        project = project_row(category="e-commerce", features=many, tech_requirements=many)

        assert complexity_score(project) == 5.0  # noqa: PLR2004
        assert complexity_score(project_row(category="landing-page")) == 0.6  # noqa: PLR2004

    def test_metrics_of_completed_project(self):
        project = project_row(
            status="completed",
            created_at=NOW - timedelta(days=10),
            completed_at=NOW - timedelta(days=7, hours=23),
        )

        metrics = project_metrics(project, activity_count=6)

        assert metrics["duration_days"] == 3  # noqa: PLR2004
        assert metrics["activity_density"] == 2.0  # noqa: PLR2004
        assert metrics["progress_score"] == 90  # noqa: PLR2004
        assert metrics["completion_rate"] == 100  # noqa: PLR2004

    def test_metrics_of_fresh_draft(self):
        metrics = project_metrics(project_row(), activity_count=1)

        assert metrics["duration_days"] == 0
        assert metrics["activity_density"] == 1.0
        assert metrics["completion_rate"] == 20  # noqa: PLR2004

    def test_performance_analysis(self):
        entries = [
            entry("completed", 4, 2.0),
            entry("deployed", 1, 3.0, "blog"),
            entry("deployed", 9, 1.0),
            entry("draft", 0, 2.0, "todo"),
        ]

        analysis = performance_analysis(entries, [activity("project_created", NOW)])

        assert analysis["average_completion_time"] == "4.7 days"
        assert analysis["success_rate"] == 75.0  # noqa: PLR2004
        assert analysis["most_used_categories"][0] == {"category": "crm", "count": 2}
        assert [e["id"] for e in analysis["fastest_projects"]] == [
            "deployed-1",
            "completed-4",
            "deployed-9",
        ]
        assert analysis["slowest_projects"][0]["id"] == "deployed-9"
        assert analysis["total_activity_count"] == 1
        assert analysis["average_project_complexity"] == 2.0  # noqa: PLR2004

    def test_analysis_of_nothing(self):
        analysis = performance_analysis([], [])

        assert analysis["average_completion_time"] == "0.0 days"
        assert analysis["success_rate"] == 0
        assert analysis["fastest_projects"] == []

    def test_insights_for_a_quiet_newcomer(self):
        titles = [i["title"] for i in insights([], [], NOW)]

        assert titles == [
            "Time to start something new",
            "Completion rate needs attention",
            "Pick things back up",
        ]

    def test_insights_for_a_busy_user(self):
        entries = [entry("deployed", n) for n in range(11)]
        recent = [activity("project_updated", NOW - timedelta(hours=n), n) for n in range(21)]
        old = activity("project_updated", NOW - timedelta(days=8), 99)

        found = insights(entries, [*recent, old], NOW)

        assert [i["type"] for i in found] == ["success", "success", "success"]
        assert found[2]["description"] == "21 activities in the past week."


class TestProjectAnalytics:
    @pytest.fixture
    def lifecycle(self, live_backend, settings):
        return ProjectLifecycle(live_backend, settings)

    @pytest.mark.asyncio
    async def test_projects_sorted_with_metrics(self, live_backend, lifecycle, user, other_user):
        crm = await lifecycle.create(user, ProjectCreate(title="CRM", category="crm"))
        await lifecycle.create(user, ProjectCreate(title="Blog", category="blog"))
        await lifecycle.create(other_user, ProjectCreate(title="Not mine"))
        await lifecycle.generate(crm.id, user)

        data = await AnalyticsService(live_backend).projects(
            user, TimeRange.MONTH, sort_by="title", order="asc"
        )

        assert [p["title"] for p in data["projects"]] == ["Blog", "CRM"]
        crm_entry = data["projects"][1]
        assert "generated_code" not in crm_entry
        assert crm_entry["metrics"]["completion_rate"] == 100  # noqa: PLR2004
        assert crm_entry["activity_count"] >= 3  # noqa: PLR2004
        assert data["analysis"]["success_rate"] == 50.0  # noqa: PLR2004
        assert data["time_range"] == "30d"

    @pytest.mark.asyncio
    async def test_time_range_filters_by_creation(self, live_backend, lifecycle, user):
        old = await lifecycle.create(user, ProjectCreate(title="Old"))
        await live_backend.projects.update(old, created_at=utcnow() - timedelta(days=40))
        await lifecycle.create(user, ProjectCreate(title="New"))

        service = AnalyticsService(live_backend)
        month = await service.projects(user, TimeRange.MONTH)
        everything = await service.projects(user, TimeRange.ALL)

        assert [p["title"] for p in month["projects"]] == ["New"]
        assert [p["title"] for p in everything["projects"]] == ["New", "Old"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("sort_by", "order"), [("user_id", "asc"), ("title", "up")])
    async def test_rejects_unknown_sorting(self, live_backend, user, sort_by, order):
        with pytest.raises(ValidationError):
            await AnalyticsService(live_backend).projects(user, TimeRange.ALL, sort_by, order)

    @pytest.mark.asyncio
    async def test_demo_projects(self, demo_store):
        data = await AnalyticsService(DemoBackend(demo_store)).projects(DEMO_USER, TimeRange.ALL)

        assert {p["id"] for p in data["projects"]} == {
            "demo-project-1",
            "demo-project-2",
            "demo-project-3",
        }
        assert data["analysis"]["total_activity_count"] == 0


class TestMonitoring:
    def test_activity_metrics_hourly_distribution(self):
        entries = [
            activity("project_updated", NOW.replace(hour=9), 2),
            activity("project_updated", NOW.replace(hour=9, minute=30), 3),
            activity("project_created", NOW.replace(hour=8), 1),
        ]

        data = activity_metrics(entries)

        assert data["total_activities_24h"] == 3  # noqa: PLR2004
        assert data["hourly_distribution"][9] == 2  # noqa: PLR2004
        assert data["hourly_distribution"][8] == 1
        assert data["activity_types"][0] == {
            "type": "project_updated",
            "count": 2,
            "percentage": pytest.approx(66.666, rel=1e-3),
        }
        assert data["recent_activities"][0]["action"] == "project_updated"

    def test_synthetic_metrics_ranges(self):
        metrics = SyntheticMetrics(random.Random(7))

        performance = metrics.performance()
        assert 200 <= performance["response_time"] <= 1200  # noqa: PLR2004
        assert performance["availability"] == 99.9  # noqa: PLR2004
        assert metrics.realtime()["status"] in {"healthy", "degraded"}
        assert all(e["count"] > 0 for e in metrics.errors()["recent_errors"])

    @pytest.mark.asyncio
    async def test_collect_single_metric(self, live_backend, settings, user):
        project = await ProjectLifecycle(live_backend, settings).create(
            user, ProjectCreate(title="CRM")
        )

        data = await MonitoringService(live_backend).collect(project.id, Metric.ACTIVITY)

        assert set(data) == {"activity"}
        assert data["activity"]["total_activities_24h"] == 1

    @pytest.mark.asyncio
    async def test_collect_all_includes_realtime(self, live_backend, settings, user):
        project = await ProjectLifecycle(live_backend, settings).create(
            user, ProjectCreate(title="CRM")
        )

        data = await MonitoringService(live_backend, SyntheticMetrics(random.Random(1))).collect(
            project.id, Metric.ALL
        )

        assert set(data) == {"performance", "usage", "errors", "activity", "realtime"}
        assert data["usage"]["activity_count"] == 1
