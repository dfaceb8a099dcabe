"""Clients for external services."""

from .github import GitHubClient
from .llm import DemoCodeGenerator, LLMCodeGenerator, LLMFactory
from .progress_stream import ProgressStreamClient
from .vercel import VercelClient

__all__ = [
    "DemoCodeGenerator",
    "GitHubClient",
    "LLMCodeGenerator",
    "LLMFactory",
    "ProgressStreamClient",
    "VercelClient",
]
