"""Deployment: one-click (GitHub repository plus Vercel project) and direct Vercel."""

import re
import time
from typing import TYPE_CHECKING, Protocol

import httpx

from ..clients.github import GitHubClient
from ..clients.vercel import VercelClient
from ..errors import Conflict, UpstreamFailure, ValidationError, mask_secrets
from ..identity import CurrentUser
from ..logging import get_logger
from ..models import Project, ProjectStatus
from ..schemas.deploy import (
    DeploymentResult,
    OneClickDeployRequest,
    VercelDeployRequest,
    VercelDeployResult,
)

if TYPE_CHECKING:
    from .lifecycle import ProjectLifecycle

logger = get_logger(__name__)


def slugify(title: str) -> str:
    return re.sub(r"[^a-z0-9]", "-", title.lower())


def generated_files(generated_code: dict | None) -> list[dict]:
    """Files of a generation artifact, whichever layout it uses."""
    if not generated_code:
        return []
    structure = generated_code.get("project_structure") or {}
    files = list(structure.get("files") or [])
    files.extend(generated_code.get("file_structure") or [])
    return files


class Deployer(Protocol):
    async def deploy(
        self, project: Project, request: OneClickDeployRequest, repo_name: str, project_name: str
    ) -> DeploymentResult: ...

    async def deploy_vercel(
        self, project: Project, request: VercelDeployRequest, project_name: str
    ) -> VercelDeployResult: ...


def https_url(url: str) -> str:
    return url if url.startswith("http") else f"https://{url}"


class LiveDeployer:
    """Runs the provider calls with the caller's tokens."""

    async def deploy(
        self, project: Project, request: OneClickDeployRequest, repo_name: str, project_name: str
    ) -> DeploymentResult:
        secrets = [request.github_token, request.vercel_token]
        try:
            return await self._deploy(project, request, repo_name, project_name)
        except httpx.HTTPError as e:
            logger.warning("deployment_transport_failed", project_id=project.id, error=str(e))
            raise UpstreamFailure(
                f"Deployment failed: {mask_secrets(str(e), secrets)}"
            ) from e

    async def _deploy(
        self, project: Project, request: OneClickDeployRequest, repo_name: str, project_name: str
    ) -> DeploymentResult:
        github = GitHubClient(request.github_token)
        repo = await github.create_repo(repo_name, description=project.description[:350])
        uploaded = await github.upload_files(
            repo.full_name, generated_files(project.generated_code)
        )

        vercel = VercelClient(request.vercel_token)
        vercel_project = await vercel.create_project(project_name, github_repo=repo.full_name)
        deployment = await vercel.create_deployment(vercel_project.id, repo.full_name)
        configured = await vercel.set_env_vars(
            vercel_project.id, [env.model_dump() for env in request.env_vars]
        )

        return DeploymentResult(
            repository_url=repo.html_url,
            deployment_url=https_url(deployment.url),
            steps={
                "github": {"repository": repo.full_name, "files_uploaded": uploaded},
                "vercel": {"project": vercel_project.model_dump(), "deployment_id": deployment.id},
                "env_vars": {"configured": configured},
            },
            repository=repo.model_dump(),
            deployment=deployment.model_dump(by_alias=True),
        )

    async def deploy_vercel(
        self, project: Project, request: VercelDeployRequest, project_name: str
    ) -> VercelDeployResult:
        try:
            return await self._deploy_vercel(project, request, project_name)
        except httpx.HTTPError as e:
            logger.warning("deployment_transport_failed", project_id=project.id, error=str(e))
            raise UpstreamFailure(
                f"Deployment failed: {mask_secrets(str(e), [request.vercel_token])}"
            ) from e

    async def _deploy_vercel(
        self, project: Project, request: VercelDeployRequest, project_name: str
    ) -> VercelDeployResult:
        vercel = VercelClient(request.vercel_token)
        vercel_project = await vercel.create_project(project_name, github_repo=request.github_repo)

        deployment = None
        if request.github_repo:
            # The project exists either way; a failed trigger leaves it building
            try:
                deployment = await vercel.create_deployment(vercel_project.id, request.github_repo)
            except (UpstreamFailure, httpx.HTTPError) as e:
                logger.warning(
                    "vercel_deployment_not_triggered", project_id=project.id, error=str(e)
                )

        configured = await vercel.set_env_vars(
            vercel_project.id, [env.model_dump() for env in request.env_vars]
        )

        if deployment is None:
            deployment_url = f"https://{project_name}.vercel.app"
            deployment_data = {"url": deployment_url, "readyState": "BUILDING"}
        else:
            deployment_url = https_url(deployment.url)
            deployment_data = deployment.model_dump(by_alias=True)

        return VercelDeployResult(
            deployment_url=deployment_url,
            project={"id": vercel_project.id, "name": vercel_project.name},
            deployment=deployment_data,
            env_vars_configured=configured,
        )


class DemoDeployer:
    """Synthetic provider results; no network calls."""

    async def deploy(
        self, project: Project, request: OneClickDeployRequest, repo_name: str, project_name: str
    ) -> DeploymentResult:
        stamp = int(time.time() * 1000)
        repository = {
            "name": repo_name,
            "full_name": f"demo-user/{repo_name}",
            "html_url": f"https://github.com/demo-user/{repo_name}",
            "clone_url": f"https://github.com/demo-user/{repo_name}.git",
            "private": False,
        }
        deployment = {
            "id": f"demo-deployment-{stamp}",
            "name": project_name,
            "url": f"https://{project_name}.vercel.app",
            "readyState": "READY",
        }
        return DeploymentResult(
            repository_url=repository["html_url"],
            deployment_url=deployment["url"],
            steps={
                "github": {
                    "repository": repository["full_name"],
                    "files_uploaded": len(generated_files(project.generated_code)),
                },
                "vercel": {
                    "project": {"id": f"demo-vercel-{stamp}", "name": project_name},
                    "deployment_id": deployment["id"],
                },
                "env_vars": {"configured": len(request.env_vars)},
            },
            repository=repository,
            deployment=deployment,
        )

    async def deploy_vercel(
        self, project: Project, request: VercelDeployRequest, project_name: str
    ) -> VercelDeployResult:
        stamp = int(time.time() * 1000)
        deployment_url = f"https://{project_name}.vercel.app"
        return VercelDeployResult(
            deployment_url=deployment_url,
            project={"id": f"demo-vercel-{stamp}", "name": project_name},
            deployment={
                "id": f"demo-deployment-{stamp}",
                "name": project_name,
                "url": deployment_url,
                "readyState": "READY",
            },
            env_vars_configured=len(request.env_vars),
        )


async def one_click_deploy(
    lifecycle: "ProjectLifecycle",
    deployer: Deployer,
    project_id: str,
    user: CurrentUser,
    request: OneClickDeployRequest,
) -> tuple[Project, DeploymentResult]:
    """Push a completed project to GitHub, deploy it on Vercel and record the result."""
    if not request.github_token or not request.vercel_token:
        raise ValidationError("GitHub token and Vercel token are required")

    project = await lifecycle.get_owned(project_id, user)
    if project.status != ProjectStatus.COMPLETED.value:
        raise Conflict(
            f"Project cannot be deployed while it is {project.status}", status=project.status
        )

    repo_name = request.repo_name or slugify(project.title)
    project_name = request.project_name or slugify(project.title)
    logger.info("deployment_started", project_id=project.id, repo_name=repo_name)

    result = await deployer.deploy(project, request, repo_name, project_name)
    project = await lifecycle.deploy(
        project,
        user,
        repository_url=result.repository_url,
        deployment_url=result.deployment_url,
        metadata={"env_vars_configured": result.steps["env_vars"]["configured"]},
    )
    return project, result


async def vercel_deploy(
    lifecycle: "ProjectLifecycle",
    deployer: Deployer,
    project_id: str,
    user: CurrentUser,
    request: VercelDeployRequest,
) -> tuple[Project, VercelDeployResult]:
    """Deploy a completed project straight to Vercel, optionally from a GitHub repository."""
    if not request.vercel_token:
        raise ValidationError("Vercel token is required")

    project = await lifecycle.get_owned(project_id, user)
    if project.status != ProjectStatus.COMPLETED.value:
        raise Conflict(
            f"Project cannot be deployed while it is {project.status}", status=project.status
        )

    project_name = request.project_name or slugify(project.title)
    logger.info("vercel_deployment_started", project_id=project.id, project_name=project_name)

    result = await deployer.deploy_vercel(project, request, project_name)
    repository_url = (
        f"https://github.com/{request.github_repo}"
        if request.github_repo
        else project.repository_url
    )
    project = await lifecycle.deploy(
        project,
        user,
        repository_url=repository_url,
        deployment_url=result.deployment_url,
        metadata={"provider": "vercel", "env_vars_configured": result.env_vars_configured},
    )
    return project, result
