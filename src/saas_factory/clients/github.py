import base64

import httpx

from ..errors import UpstreamFailure, mask_secrets
from ..logging import get_logger
from ..schemas.providers import GitHubRepository

logger = get_logger(__name__)

GITHUB_API_URL = "https://api.github.com"


def _error_message(resp: httpx.Response) -> str:
    try:
        return resp.json().get("message") or resp.reason_phrase
    except ValueError:
        return resp.text or resp.reason_phrase


class GitHubClient:
    """Client for GitHub calls made with a user's personal access token."""

    def __init__(self, token: str, base_url: str = GITHUB_API_URL):
        self.token = token
        self.base_url = base_url
        self.headers = {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github+json",
        }

    def _check(self, resp: httpx.Response, action: str) -> None:
        if resp.is_success:
            return
        message = mask_secrets(_error_message(resp), [self.token])
        logger.warning("github_request_failed", action=action, status_code=resp.status_code)
        raise UpstreamFailure(f"GitHub {action} failed: {message}", provider="github")

    async def create_repo(
        self, name: str, description: str = "", private: bool = False
    ) -> GitHubRepository:
        """Create a repository owned by the token's user."""
        payload = {
            "name": name,
            "description": description,
            "private": private,
            "auto_init": True,
        }

        async with httpx.AsyncClient() as client:
            resp = await client.post(
                f"{self.base_url}/user/repos",
                headers=self.headers,
                json=payload,
            )
            self._check(resp, "repository creation")
            data = resp.json()
            logger.info("github_repo_created", name=name, repo_url=data.get("html_url"))
            return GitHubRepository.model_validate(data)

    async def create_file(
        self,
        full_name: str,
        path: str,
        content: str,
        message: str,
        branch: str = "main",
    ) -> dict:
        """Create a file in the repository."""
        payload = {
            "message": message,
            "content": base64.b64encode(content.encode()).decode(),
            "branch": branch,
        }

        async with httpx.AsyncClient() as client:
            resp = await client.put(
                f"{self.base_url}/repos/{full_name}/contents/{path}",
                headers=self.headers,
                json=payload,
            )
            self._check(resp, "file upload")
            logger.debug("github_file_created", repo=full_name, path=path)
            return resp.json()["content"]

    async def upload_files(self, full_name: str, files: list[dict]) -> int:
        """Upload generated files one commit each. Returns the number uploaded."""
        uploaded = 0
        for file in files:
            path = file.get("path")
            if not path or file.get("type", "file") != "file":
                continue
            await self.create_file(
                full_name,
                path,
                file.get("content") or "",
                message=f"Add {path}",
            )
            uploaded += 1
        logger.info("github_files_uploaded", repo=full_name, count=uploaded)
        return uploaded
