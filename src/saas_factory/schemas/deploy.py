"""Deployment schemas: one-click and direct Vercel."""

from typing import Any

from pydantic import BaseModel, Field


class EnvVar(BaseModel):
    key: str
    value: str


class OneClickDeployRequest(BaseModel):
    github_token: str | None = Field(None, description="GitHub personal access token")
    vercel_token: str | None = Field(None, description="Vercel access token")
    repo_name: str | None = None
    project_name: str | None = None
    env_vars: list[EnvVar] = Field(default_factory=list)


class DeploymentResult(BaseModel):
    """Outcome of the provider calls, before the project itself is updated."""

    repository_url: str
    deployment_url: str
    steps: dict[str, Any]
    repository: dict[str, Any]
    deployment: dict[str, Any]


class VercelDeployRequest(BaseModel):
    vercel_token: str | None = Field(None, description="Vercel access token")
    project_name: str | None = None
    github_repo: str | None = Field(None, description="owner/name of a repository to link")
    env_vars: list[EnvVar] = Field(default_factory=list)


class VercelDeployResult(BaseModel):
    """Outcome of a direct Vercel deployment.

    Without a linked repository no deployment is triggered; `deployment` then
    holds the expected URL with readyState BUILDING.
    """

    deployment_url: str
    project: dict[str, Any]
    deployment: dict[str, Any]
    env_vars_configured: int = 0
