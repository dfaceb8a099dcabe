"""Service configuration with pydantic-settings.

Everything is optional with development defaults:
- DATABASE_URL falls back to a local SQLite file.
- REDIS_URL enables live progress streaming when set.
- OPEN_ROUTER_KEY / OPENAI_API_KEY enable AI generation when set.
- DEMO_MODE=true serves every request from the in-memory demo store.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """SaaS Factory settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Runtime ===

    environment: Literal["development", "production", "test"] = Field(
        default="production",
        description="Deployment environment; 'development' adds tracebacks to error responses",
    )
    demo_mode: bool = Field(
        default=False,
        description="Serve all requests from synthetic demo data",
    )

    # === Storage ===

    database_url: str = Field(
        default="sqlite+aiosqlite:///./saas_factory.db",
        description="SQLAlchemy async connection URL",
        examples=["postgresql+asyncpg://user:pass@db:5432/saas_factory"],
    )
    redis_url: str | None = Field(
        default=None,
        description="Redis connection URL (optional, enables live progress streams)",
        examples=["redis://redis:6379/0"],
    )

    # === Generation ===

    generation_timeout_seconds: float = Field(
        default=180.0,
        gt=0,
        description="Hard limit the caller waits for the code generator",
    )
    progress_tick_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Interval between simulated progress events",
    )
    progress_stream_block_ms: int = Field(
        default=15000,
        ge=1,
        description="How long a live progress stream blocks on Redis per read",
    )

    # === LLM ===

    llm_provider: Literal["openrouter", "openai"] = Field(default="openrouter")
    llm_model: str = Field(default="anthropic/claude-3.5-sonnet")
    llm_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    llm_max_tokens: int = Field(default=8000, ge=1)
    open_router_key: str = Field(default="", description="OpenRouter API key (optional)")
    openai_api_key: str = Field(default="", description="OpenAI API key (optional)")

    # === Logging ===

    service_name: str = Field(
        default="saas-factory",
        description="Service name for structured logging",
    )
    log_format: Literal["json", "console"] | None = Field(
        default=None,
        description="Log output format; unset means json in production, console elsewhere",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
