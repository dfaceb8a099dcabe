import httpx

from ..errors import UpstreamFailure, mask_secrets
from ..logging import get_logger
from ..schemas.providers import VercelDeployment, VercelProject

logger = get_logger(__name__)

VERCEL_API_URL = "https://api.vercel.com"

ENV_TARGETS = ["production", "preview", "development"]


def _error_message(resp: httpx.Response) -> str:
    try:
        error = resp.json().get("error") or {}
    except ValueError:
        return resp.text or resp.reason_phrase
    return error.get("message") or resp.reason_phrase


class VercelClient:
    """Client for the Vercel REST API authenticated with a user token."""

    def __init__(self, token: str, base_url: str = VERCEL_API_URL):
        self.token = token
        self.base_url = base_url
        self.headers = {"Authorization": f"Bearer {token}"}

    def _check(self, resp: httpx.Response, action: str) -> None:
        if resp.is_success:
            return
        message = mask_secrets(_error_message(resp), [self.token])
        logger.warning("vercel_request_failed", action=action, status_code=resp.status_code)
        raise UpstreamFailure(f"Vercel {action} failed: {message}", provider="vercel")

    async def create_project(self, name: str, github_repo: str | None = None) -> VercelProject:
        """Create a Next.js project, optionally linked to a GitHub repository."""
        payload: dict = {
            "name": name,
            "framework": "nextjs",
            "publicSource": False,
            "buildCommand": "npm run build",
            "outputDirectory": ".next",
            "installCommand": "npm install",
            "devCommand": "npm run dev",
        }
        if github_repo:
            payload["gitRepository"] = {"repo": github_repo, "type": "github"}

        async with httpx.AsyncClient() as client:
            resp = await client.post(
                f"{self.base_url}/v9/projects", headers=self.headers, json=payload
            )
            self._check(resp, "project creation")
            project = VercelProject.model_validate(resp.json())
            logger.info("vercel_project_created", name=name, vercel_project_id=project.id)
            return project

    async def create_deployment(self, project_id: str, github_repo: str) -> VercelDeployment:
        """Trigger a production deployment from the repository's main branch."""
        payload = {
            "name": project_id,
            "target": "production",
            "gitSource": {"ref": "main", "repo": github_repo, "type": "github"},
        }

        async with httpx.AsyncClient() as client:
            resp = await client.post(
                f"{self.base_url}/v13/deployments", headers=self.headers, json=payload
            )
            self._check(resp, "deployment")
            deployment = VercelDeployment.model_validate(resp.json())
            logger.info("vercel_deployment_created", deployment_id=deployment.id)
            return deployment

    async def set_env_vars(self, project_id: str, env_vars: list[dict[str, str]]) -> int:
        """Set encrypted environment variables. Returns how many were accepted."""
        configured = 0
        async with httpx.AsyncClient() as client:
            for env_var in env_vars:
                key, value = env_var.get("key"), env_var.get("value")
                if not key or not value:
                    continue
                try:
                    resp = await client.post(
                        f"{self.base_url}/v9/projects/{project_id}/env",
                        headers=self.headers,
                        json={
                            "key": key,
                            "value": value,
                            "type": "encrypted",
                            "target": ENV_TARGETS,
                        },
                    )
                except httpx.HTTPError as e:
                    logger.warning("vercel_env_var_failed", key=key, error=str(e))
                    continue
                if resp.is_success:
                    configured += 1
                else:
                    logger.warning(
                        "vercel_env_var_rejected", key=key, status_code=resp.status_code
                    )
        return configured
