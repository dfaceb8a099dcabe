"""Per-user analytics: the overview and per-project metrics."""

from collections import Counter
from datetime import date, datetime, timedelta
from enum import Enum
import math
from typing import Any

from ..backends import DataBackend
from ..catalog import SYSTEM_CATEGORIES
from ..errors import ValidationError
from ..identity import CurrentUser
from ..models import Project, ProjectActivity, ProjectStatus
from ..models.base import as_utc, utcnow
from ..schemas.project import ProjectRead

CATEGORY_NAMES = {c["id"]: c["name"] for c in SYSTEM_CATEGORIES}

STATUS_NAMES = {
    ProjectStatus.DRAFT.value: "Draft",
    ProjectStatus.GENERATING.value: "Generating",
    ProjectStatus.COMPLETED.value: "Completed",
    ProjectStatus.DEPLOYED.value: "Deployed",
    ProjectStatus.ERROR.value: "Error",
}

STATUS_COLORS = {
    ProjectStatus.DRAFT.value: "#6B7280",
    ProjectStatus.GENERATING.value: "#F59E0B",
    ProjectStatus.COMPLETED.value: "#10B981",
    ProjectStatus.DEPLOYED.value: "#3B82F6",
    ProjectStatus.ERROR.value: "#EF4444",
}

ACTIVE_STATUSES = (ProjectStatus.DRAFT.value, ProjectStatus.GENERATING.value)

FINISHED_STATUSES = (ProjectStatus.COMPLETED.value, ProjectStatus.DEPLOYED.value)

PROGRESS_SCORES = {
    ProjectStatus.DRAFT.value: 20,
    ProjectStatus.GENERATING.value: 60,
    ProjectStatus.COMPLETED.value: 90,
    ProjectStatus.DEPLOYED.value: 100,
    ProjectStatus.ERROR.value: 10,
}

# Multiplier applied to the feature and tech-requirement score
CATEGORY_COMPLEXITY = {
    "e-commerce": 1.5,
    "dashboard": 1.3,
    "crm": 1.2,
    "cms": 1.1,
    "portfolio": 0.9,
    "todo": 0.8,
    "blog": 0.8,
    "form": 0.7,
    "landing-page": 0.6,
}

SORT_FIELDS = ("created_at", "updated_at", "title", "status", "category")
SORT_ORDERS = ("asc", "desc")


class TimeRange(str, Enum):
    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"
    YEAR = "1y"
    ALL = "all"

    @property
    def period(self) -> timedelta:
        """Length of one trend period. "all" compares 30-day periods."""
        return {
            TimeRange.WEEK: timedelta(days=7),
            TimeRange.MONTH: timedelta(days=30),
            TimeRange.QUARTER: timedelta(days=90),
            TimeRange.YEAR: timedelta(days=365),
        }.get(self, timedelta(days=30))

    @property
    def timeline_days(self) -> int:
        return {TimeRange.WEEK: 7, TimeRange.MONTH: 30}.get(self, 90)

    def since(self, now: datetime) -> datetime | None:
        """Start of the range, or None for "all"."""
        return None if self is TimeRange.ALL else now - self.period


def breakdown(values: list[str]) -> list[tuple[str, int, float]]:
    counts = Counter(values)
    total = len(values)
    return [(key, count, count / total * 100) for key, count in counts.most_common()]


def activity_timeline(
    activities: list[ProjectActivity], days: int, today: date
) -> list[dict[str, Any]]:
    daily = Counter(as_utc(a.created_at).date() for a in activities)
    return [
        {"date": day.isoformat(), "count": daily.get(day, 0)}
        for day in (today - timedelta(days=offset) for offset in range(days - 1, -1, -1))
    ]


def trends(
    activities: list[ProjectActivity], period: timedelta, now: datetime
) -> dict[str, Any]:
    current_start = now - period
    previous_start = now - 2 * period
    current = [a for a in activities if as_utc(a.created_at) >= current_start]
    previous = [
        a for a in activities if previous_start <= as_utc(a.created_at) < current_start
    ]

    if previous:
        growth_rate = (len(current) - len(previous)) / len(previous) * 100
    else:
        growth_rate = 100.0 if current else 0.0

    actions = Counter(a.action for a in current)
    return {
        "projects_created_this_period": actions["project_created"],
        "projects_completed_this_period": actions["project_completed"],
        "deployments_this_period": actions["project_deployed"],
        "growth_rate": growth_rate,
    }


def _count_lines(text: str | None) -> int:
    return sum(1 for line in (text or "").splitlines() if line.strip())


def _sort_key(project: Project, field: str) -> tuple[Any, str]:
    value = getattr(project, field)
    if isinstance(value, datetime):
        value = as_utc(value)
    return value, project.id


def complexity_score(project: Project) -> float:
    """1 to 5, from the number of features and tech requirements and the category."""
    score = 1.0
    score += min(_count_lines(project.features) * 0.2, 2)
    score += min(_count_lines(project.tech_requirements) * 0.3, 3)
    score *= CATEGORY_COMPLEXITY.get(project.category, 1.0)
    return min(round(score, 1), 5.0)


def project_metrics(project: Project, activity_count: int) -> dict[str, Any]:
    started = as_utc(project.created_at)
    ended = as_utc(project.completed_at or project.updated_at)
    duration_days = math.ceil((ended - started) / timedelta(days=1))
    progress = PROGRESS_SCORES.get(project.status, 0)
    return {
        "duration_days": duration_days,
        "activity_density": activity_count / max(duration_days, 1),
        "progress_score": progress,
        "complexity_score": complexity_score(project),
        "completion_rate": 100 if project.completed_at else progress,
    }


def performance_analysis(
    entries: list[dict[str, Any]], activities: list[ProjectActivity]
) -> dict[str, Any]:
    finished = [e for e in entries if e["status"] in FINISHED_STATUSES]
    by_duration = sorted(finished, key=lambda e: e["metrics"]["duration_days"])
    average_days = (
        sum(e["metrics"]["duration_days"] for e in finished) / len(finished) if finished else 0
    )
    success_rate = len(finished) / len(entries) * 100 if entries else 0
    categories = Counter(e["category"] for e in entries)
    return {
        "average_completion_time": f"{average_days:.1f} days",
        "success_rate": round(success_rate, 1),
        "most_used_categories": [
            {"category": category, "count": count}
            for category, count in categories.most_common(5)
        ],
        "fastest_projects": by_duration[:3],
        "slowest_projects": by_duration[::-1][:3],
        "total_activity_count": len(activities),
        "average_project_complexity": (
            sum(e["metrics"]["complexity_score"] for e in entries) / len(entries)
            if entries
            else 0
        ),
    }


def insights(
    entries: list[dict[str, Any]], activities: list[ProjectActivity], now: datetime
) -> list[dict[str, str]]:
    """Rule-based hints from project count, completion rate and last week's activity."""
    found = []
    total = len(entries)
    if total > 10:  # noqa: PLR2004
        found.append(
            {
                "type": "success",
                "title": "High productivity",
                "description": f"You are managing {total} projects.",
                "action": "Keep up the pace.",
            }
        )
    elif total < 3:  # noqa: PLR2004
        found.append(
            {
                "type": "info",
                "title": "Time to start something new",
                "description": "A new project is a good way to build your skills.",
                "action": "Try starting one from a template.",
            }
        )

    finished = sum(1 for e in entries if e["status"] in FINISHED_STATUSES)
    rate = finished / total if total else 0
    if rate > 0.8:  # noqa: PLR2004
        found.append(
            {
                "type": "success",
                "title": "Excellent completion rate",
                "description": f"{round(rate * 100)}% of your projects are finished.",
                "action": "Take on a new challenge.",
            }
        )
    elif rate < 0.3:  # noqa: PLR2004
        found.append(
            {
                "type": "warning",
                "title": "Completion rate needs attention",
                "description": f"Only {round(rate * 100)}% of your projects are finished.",
                "action": "Narrow the scope and start with smaller goals.",
            }
        )

    week_ago = now - timedelta(days=7)
    recent = sum(1 for a in activities if as_utc(a.created_at) > week_ago)
    if recent == 0:
        found.append(
            {
                "type": "info",
                "title": "Pick things back up",
                "description": "There was no project activity in the past week.",
                "action": "Review your projects and plan the next step.",
            }
        )
    elif recent > 20:  # noqa: PLR2004
        found.append(
            {
                "type": "success",
                "title": "Very active week",
                "description": f"{recent} activities in the past week.",
                "action": "Keep it going.",
            }
        )
    return found


class AnalyticsService:
    def __init__(self, backend: DataBackend):
        self.backend = backend

    async def overview(self, user: CurrentUser, time_range: TimeRange) -> dict[str, Any]:
        now = utcnow()
        projects, total = await self.backend.projects.list_for_user(user.id)
        favorites = await self.backend.favorites.count_for_user(user.id)

        period = time_range.period
        activities = await self.backend.activities.list_for_user(user.id, since=now - 2 * period)
        if time_range == TimeRange.ALL:
            in_range = activities
        else:
            in_range = [a for a in activities if as_utc(a.created_at) >= now - period]

        statuses = [p.status for p in projects]
        return {
            "overview": {
                "total_projects": total,
                "active_projects": sum(1 for s in statuses if s in ACTIVE_STATUSES),
                "completed_projects": statuses.count(ProjectStatus.COMPLETED.value),
                "deployed_projects": statuses.count(ProjectStatus.DEPLOYED.value),
                "favorite_projects": favorites,
            },
            "trends": trends(activities, period, now),
            "category_breakdown": [
                {
                    "category": category,
                    "name": CATEGORY_NAMES.get(category, category),
                    "count": count,
                    "percentage": percentage,
                }
                for category, count, percentage in breakdown([p.category for p in projects])
            ],
            "status_breakdown": [
                {
                    "status": status,
                    "name": STATUS_NAMES.get(status, status),
                    "count": count,
                    "percentage": percentage,
                    "color": STATUS_COLORS.get(status, "#6B7280"),
                }
                for status, count, percentage in breakdown(statuses)
            ],
            "activity_timeline": activity_timeline(
                in_range, time_range.timeline_days, now.date()
            ),
        }

    async def projects(
        self,
        user: CurrentUser,
        time_range: TimeRange,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> dict[str, Any]:
        """Projects created in the range, each with its metrics, plus an analysis.

        Raises:
            ValidationError: Unknown sort field or order
        """
        if sort_by not in SORT_FIELDS:
            raise ValidationError(f"Cannot sort by {sort_by}", allowed=list(SORT_FIELDS))
        if order not in SORT_ORDERS:
            raise ValidationError("Order must be asc or desc")

        now = utcnow()
        since = time_range.since(now)
        owned, _ = await self.backend.projects.list_for_user(user.id)
        if since is not None:
            owned = [p for p in owned if as_utc(p.created_at) >= since]
        owned.sort(key=lambda p: _sort_key(p, sort_by), reverse=order == "desc")
        activities = await self.backend.activities.list_for_user(user.id, since=since)

        per_project = Counter(a.project_id for a in activities)
        latest: dict[str, datetime] = {}
        for entry in activities:
            latest.setdefault(entry.project_id, entry.created_at)

        entries = []
        for project in owned:
            entry = ProjectRead.model_validate(project).model_dump(exclude={"generated_code"})
            entry["metrics"] = project_metrics(project, per_project[project.id])
            entry["activity_count"] = per_project[project.id]
            entry["last_activity"] = latest.get(project.id, project.updated_at)
            entries.append(entry)

        return {
            "projects": entries,
            "analysis": performance_analysis(entries, activities),
            "insights": insights(entries, activities, now),
            "time_range": time_range.value,
        }
