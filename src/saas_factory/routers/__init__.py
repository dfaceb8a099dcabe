"""API routers."""

from . import (
    analytics,
    categories,
    collaborators,
    deploy,
    favorites,
    generation,
    health,
    monitoring,
    projects,
    shares,
    templates,
)

__all__ = [
    "analytics",
    "categories",
    "collaborators",
    "deploy",
    "favorites",
    "generation",
    "health",
    "monitoring",
    "projects",
    "shares",
    "templates",
]
