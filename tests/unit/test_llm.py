"""Tests for the chat-model code generator."""

import json

from langchain_core.messages import AIMessage
import pytest

from saas_factory.clients.llm import (
    OPENROUTER_BASE_URL,
    DemoCodeGenerator,
    LLMCodeGenerator,
    LLMFactory,
    build_generation_prompt,
    parse_generated_content,
)
from saas_factory.errors import ServiceUnavailable

ARTIFACT = {
    "project_structure": {"folders": ["app"], "files": [{"path": "app/page.tsx", "content": "x"}]},
    "database_schema": {"tables": [{"name": "contacts", "columns": []}]},
    "api_endpoints": [{"path": "/api/contacts", "methods": ["GET"]}],
    "features": [{"name": "contacts", "status": "implemented"}],
}


class FakeChatModel:
    def __init__(self, content: str):
        self.content = content
        self.messages = None

    async def ainvoke(self, messages):
        self.messages = messages
        return AIMessage(content=self.content)


class TestParseGeneratedContent:
    def test_extracts_fenced_json(self):
        content = f"Here you go:\n```json\n{json.dumps(ARTIFACT)}\n```\nEnjoy."

        result = parse_generated_content(content)

        assert result["project_structure"] == ARTIFACT["project_structure"]
        assert result["api_endpoints"] == ARTIFACT["api_endpoints"]
        assert result["version"] == "1.0.0"
        assert "generated_at" in result
        assert "raw_content" not in result

    def test_missing_sections_default_to_empty(self):
        result = parse_generated_content('```json\n{"features": []}\n```')

        assert result["project_structure"] == {}
        assert result["database_schema"] == {}
        assert result["api_endpoints"] == []

    @pytest.mark.parametrize("content", ["plain text answer", "```json\n{not json}\n```"])
    def test_falls_back_to_raw_content(self, content):
        result = parse_generated_content(content)

        assert result["raw_content"] == content
        assert result["version"] == "1.0.0"


class TestPrompt:
    def test_includes_requirements(self):
        prompt = build_generation_prompt(
            {"title": "CRM", "description": "Sales", "category": "crm", "features": "pipeline"}
        )

        assert "- Title: CRM" in prompt
        assert "- Main features: pipeline" in prompt
        assert "Design requirements" not in prompt
        assert "```json" in prompt


class TestLLMFactory:
    def test_openrouter_requires_key(self, settings):
        with pytest.raises(ServiceUnavailable, match="OPEN_ROUTER_KEY"):
            LLMFactory.create_llm(settings)

    def test_openai_requires_key(self, settings):
        settings.llm_provider = "openai"

        with pytest.raises(ServiceUnavailable, match="OPENAI_API_KEY"):
            LLMFactory.create_llm(settings)

    def test_openrouter_model(self, settings):
        settings.open_router_key = "sk-or-test"

        llm = LLMFactory.create_llm(settings)

        assert llm.openai_api_base == OPENROUTER_BASE_URL
        assert llm.model_name == settings.llm_model


class TestGenerators:
    @pytest.mark.asyncio
    async def test_llm_generator_parses_answer(self, settings):
        model = FakeChatModel(f"```json\n{json.dumps(ARTIFACT)}\n```")
        generator = LLMCodeGenerator(settings, llm=model)

        result = await generator.generate({"title": "CRM", "description": "Sales"})

        assert result["features"] == ARTIFACT["features"]
        assert "- Title: CRM" in model.messages[0].content

    @pytest.mark.asyncio
    async def test_demo_generator_names_package_after_title(self):
        result = await DemoCodeGenerator().generate({"title": "My Shop"})

        package = json.loads(result["project_structure"]["files"][0]["content"])
        assert package["name"] == "my-shop"
