"""Code generation through a chat model.

The generator turns a project's free-text requirements into a scaffold
artifact: project structure, database schema, API endpoints and features.
"""

import json
import re
from typing import Any, Protocol

from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from ..config import Settings
from ..errors import ServiceUnavailable
from ..logging import get_logger
from ..models.base import utcnow

logger = get_logger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
ARTIFACT_VERSION = "1.0.0"

_JSON_BLOCK = re.compile(r"```json\s*([\s\S]*?)\s*```")


class CodeGenerator(Protocol):
    async def generate(self, project_data: dict[str, Any]) -> dict[str, Any]: ...


class LLMFactory:
    """Factory for chat model instances.

    Supports:
    - OpenRouter (default): many models behind one OpenAI-compatible endpoint
    - OpenAI: direct connection to the OpenAI API
    """

    @staticmethod
    def create_llm(settings: Settings) -> ChatOpenAI:
        """Create a chat model from settings.

        Raises:
            ServiceUnavailable: If the provider's API key is not configured
            ValueError: If an unknown provider is configured
        """
        provider = settings.llm_provider
        logger.info(
            "creating_llm",
            provider=provider,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
        )

        if provider == "openrouter":
            return LLMFactory._create_openrouter_llm(settings)
        elif provider == "openai":
            return LLMFactory._create_openai_llm(settings)
        else:
            raise ValueError(
                f"Unknown LLM provider: {provider}. Supported providers: openrouter, openai"
            )

    @staticmethod
    def _create_openrouter_llm(settings: Settings) -> ChatOpenAI:
        if not settings.open_router_key:
            raise ServiceUnavailable(
                "AI generation is not configured. Set OPEN_ROUTER_KEY to enable it."
            )
        return ChatOpenAI(
            base_url=OPENROUTER_BASE_URL,
            api_key=settings.open_router_key,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            default_headers={"X-Title": "SaaS Factory"},
        )

    @staticmethod
    def _create_openai_llm(settings: Settings) -> ChatOpenAI:
        if not settings.openai_api_key:
            raise ServiceUnavailable(
                "AI generation is not configured. Set OPENAI_API_KEY to enable it."
            )
        return ChatOpenAI(
            api_key=settings.openai_api_key,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )


def build_generation_prompt(project_data: dict[str, Any]) -> str:
    """Build the user prompt for a full project scaffold."""
    lines = [
        "You are an experienced full-stack developer. Generate the complete project",
        "structure and code of a modern SaaS application for the requirements below.",
        "",
        "## Project",
        f"- Title: {project_data.get('title', '')}",
        f"- Description: {project_data.get('description', '')}",
        f"- Category: {project_data.get('category', 'other')}",
    ]
    for key, label in (
        ("features", "Main features"),
        ("design_preferences", "Design requirements"),
        ("tech_requirements", "Technical requirements"),
    ):
        if project_data.get(key):
            lines.append(f"- {label}: {project_data[key]}")

    lines += [
        "",
        "## Stack",
        "- Frontend: Next.js + React + TypeScript",
        "- Styling: Tailwind CSS",
        "- Backend: Next.js API routes",
        "- Database: PostgreSQL",
        "- Deployment: Vercel",
        "",
        "## Output",
        "Answer with a single ```json fenced block of the form:",
        "{",
        '  "project_structure": {"folders": [...], "files": [{"path": "...", "content": "..."}]},',
        '  "database_schema": {"tables": [{"name": "...", "columns": [...]}]},',
        '  "api_endpoints": [{"path": "...", "methods": [...], "description": "..."}],',
        '  "features": [{"name": "...", "status": "implemented", "files": [...]}]',
        "}",
        "",
        "The code must run, be type-safe, use hooks and function components,",
        "be responsive and handle errors.",
    ]
    return "\n".join(lines)


def parse_generated_content(content: str) -> dict[str, Any]:
    """Extract the artifact from a model answer.

    Falls back to the raw text when no parseable JSON block is present.
    """
    generated_at = utcnow().isoformat()
    match = _JSON_BLOCK.search(content)
    if match:
        try:
            parsed = json.loads(match.group(1))
        except json.JSONDecodeError:
            logger.warning("generated_content_not_json", length=len(content))
        else:
            return {
                "project_structure": parsed.get("project_structure") or {},
                "database_schema": parsed.get("database_schema") or {},
                "api_endpoints": parsed.get("api_endpoints") or [],
                "features": parsed.get("features") or [],
                "generated_at": generated_at,
                "version": ARTIFACT_VERSION,
            }

    return {
        "raw_content": content,
        "generated_at": generated_at,
        "version": ARTIFACT_VERSION,
    }


class LLMCodeGenerator:
    """Generates project code with a langchain chat model."""

    def __init__(self, settings: Settings, llm: ChatOpenAI | None = None):
        self.settings = settings
        self._llm = llm

    @property
    def llm(self) -> ChatOpenAI:
        if self._llm is None:
            self._llm = LLMFactory.create_llm(self.settings)
        return self._llm

    async def generate(self, project_data: dict[str, Any]) -> dict[str, Any]:
        prompt = build_generation_prompt(project_data)
        response = await self.llm.ainvoke([HumanMessage(content=prompt)])
        content = response.content if isinstance(response.content, str) else str(response.content)
        logger.info("llm_generation_received", length=len(content))
        return parse_generated_content(content)


class DemoCodeGenerator:
    """Returns a small fixed scaffold without calling any model."""

    async def generate(self, project_data: dict[str, Any]) -> dict[str, Any]:
        name = "-".join((project_data.get("title") or "demo-project").lower().split())
        package_json = {
            "name": name,
            "version": "1.0.0",
            "dependencies": {"next": "^15.0.0", "react": "^19.0.0", "typescript": "^5.0.0"},
        }
        return {
            "project_structure": {
                "folders": ["app", "components", "lib", "types"],
                "files": [{"path": "package.json", "content": json.dumps(package_json, indent=2)}],
            },
            "database_schema": {"tables": []},
            "api_endpoints": [],
            "features": [],
            "generated_at": utcnow().isoformat(),
            "version": ARTIFACT_VERSION,
        }
