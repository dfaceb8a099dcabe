"""Pydantic schemas for GitHub and Vercel API responses.

Only the fields the deployment flow reads are declared; everything else the
providers send is kept as extra data.

GitHub API Documentation: https://docs.github.com/en/rest
Vercel API Documentation: https://vercel.com/docs/rest-api
"""

from pydantic import BaseModel, ConfigDict, Field


class GitHubRepository(BaseModel):
    """GitHub repository. Returned from POST /user/repos."""

    model_config = ConfigDict(extra="allow")

    id: int = Field(..., description="Numeric repository ID")
    name: str = Field(..., description="Repository name")
    full_name: str = Field(..., description="owner/name")
    html_url: str = Field(..., description="Web URL of the repository")
    clone_url: str | None = Field(None, description="HTTPS clone URL")
    private: bool = Field(False, description="Whether the repository is private")


class VercelProject(BaseModel):
    """Vercel project. Returned from POST /v9/projects."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Project ID")
    name: str = Field(..., description="Project name")


class VercelDeployment(BaseModel):
    """Vercel deployment. Returned from POST /v13/deployments."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., description="Deployment ID")
    name: str | None = Field(None, description="Project name")
    url: str = Field(..., description="Deployment hostname, without scheme")
    ready_state: str | None = Field(None, alias="readyState", description="Build state")
