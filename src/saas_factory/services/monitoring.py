"""Project monitoring.

Activity figures come from the project's activity log. Performance, error and
realtime figures are synthetic: no telemetry backend exists yet.
"""

from collections import Counter
from datetime import timedelta
from enum import Enum
import random
from typing import Any

from ..backends import DataBackend
from ..models import ProjectActivity
from ..models.base import as_utc, utcnow
from ..schemas.activity import ActivityRead

ACTIVITY_WINDOW = timedelta(hours=24)
RECENT_ACTIVITY_LIMIT = 10


class Metric(str, Enum):
    ALL = "all"
    PERFORMANCE = "performance"
    USAGE = "usage"
    ERRORS = "errors"
    ACTIVITY = "activity"


def activity_types(activities: list[ProjectActivity]) -> list[dict[str, Any]]:
    counts = Counter(a.action for a in activities)
    total = len(activities)
    return [
        {"type": action, "count": count, "percentage": count / total * 100}
        for action, count in counts.most_common()
    ]


def activity_metrics(activities: list[ProjectActivity]) -> dict[str, Any]:
    hourly = [0] * 24
    for activity in activities:
        hourly[as_utc(activity.created_at).hour] += 1
    return {
        "total_activities_24h": len(activities),
        "hourly_distribution": hourly,
        "recent_activities": [
            ActivityRead.model_validate(a).model_dump(mode="json")
            for a in activities[:RECENT_ACTIVITY_LIMIT]
        ],
        "activity_types": activity_types(activities),
    }


class SyntheticMetrics:
    """Plausible random figures for dashboards."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def performance(self) -> dict[str, Any]:
        r = self.rng
        return {
            "response_time": r.uniform(200, 1200),
            "availability": 99.9,
            "throughput": r.randint(100, 1100),
            "error_rate": r.uniform(0, 0.5),
            "cpu_usage": r.uniform(0, 100),
            "memory_usage": r.uniform(0, 100),
            "disk_usage": r.uniform(0, 100),
        }

    def usage(self, activity_count: int) -> dict[str, Any]:
        r = self.rng
        return {
            "page_views": r.randint(100, 10100),
            "unique_visitors": r.randint(50, 1050),
            "api_calls": r.randint(200, 5200),
            "data_transfer": f"{r.uniform(0, 100):.2f} MB",
            "storage_used": f"{r.uniform(0, 500):.1f} MB",
            "bandwidth_used": f"{r.uniform(0, 1000):.1f} MB",
            "activity_count": activity_count,
        }

    def errors(self) -> dict[str, Any]:
        r = self.rng
        recent = [
            {"type": "404 Not Found", "count": r.randint(0, 9)},
            {"type": "500 Internal Server Error", "count": r.randint(0, 4)},
            {"type": "Database Connection Error", "count": r.randint(0, 2)},
            {"type": "API Rate Limit", "count": r.randint(0, 7)},
            {"type": "Timeout Error", "count": r.randint(0, 5)},
        ]
        return {
            "total_errors": r.randint(0, 49),
            "error_rate": r.uniform(0, 2),
            "critical_errors": r.randint(0, 4),
            "warnings": r.randint(0, 19),
            "recent_errors": [e for e in recent if e["count"] > 0],
        }

    def realtime(self) -> dict[str, Any]:
        r = self.rng
        last_deployment = utcnow() - timedelta(seconds=r.uniform(0, 7 * 24 * 3600))
        return {
            "current_users": r.randint(0, 99),
            "requests_per_minute": r.randint(10, 509),
            "average_response_time": r.uniform(100, 1100),
            "status": "healthy" if r.random() > 0.1 else "degraded",
            "last_deployment": last_deployment.isoformat(),
            "uptime": f"{99 + r.random():.3f}%",
        }


class MonitoringService:
    def __init__(self, backend: DataBackend, metrics: SyntheticMetrics | None = None):
        self.backend = backend
        self.metrics = metrics or SyntheticMetrics()

    async def collect(self, project_id: str, metric: Metric) -> dict[str, Any]:
        data: dict[str, Any] = {}
        wants = {metric} if metric != Metric.ALL else set(Metric)

        activities: list[ProjectActivity] = []
        if wants & {Metric.USAGE, Metric.ACTIVITY}:
            activities = await self.backend.activities.list_for_project(
                project_id, limit=10_000, since=utcnow() - ACTIVITY_WINDOW
            )

        if Metric.PERFORMANCE in wants:
            data["performance"] = self.metrics.performance()
        if Metric.USAGE in wants:
            data["usage"] = self.metrics.usage(len(activities))
        if Metric.ERRORS in wants:
            data["errors"] = self.metrics.errors()
        if Metric.ACTIVITY in wants:
            data["activity"] = activity_metrics(activities)
        if metric == Metric.ALL:
            data["realtime"] = self.metrics.realtime()
        return data
