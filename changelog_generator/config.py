"""
Configuration for the changelog generator.

All settings can be overridden via environment variables with the
CHANGELOG_ prefix (or a .env file in the working directory).

Usage:
    from changelog_generator.config import get_settings

    settings = get_settings()
    print(settings.model)
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChangelogSettings(BaseSettings):
    """
    Deployment configuration.

    Backend selection (model, token ceiling) lives here and never comes from
    the request.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHANGELOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    api_host: str = Field(default="127.0.0.1", description="API server host")
    api_port: int = Field(default=5000, description="API server port")

    # Generation backend
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "CHANGELOG_OPENAI_API_KEY",
            "AI_INTEGRATIONS_OPENAI_API_KEY",
            "OPENAI_API_KEY",
        ),
        description="API key for the generation backend"
    )
    openai_base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "CHANGELOG_OPENAI_BASE_URL",
            "AI_INTEGRATIONS_OPENAI_BASE_URL",
        ),
        description="Override for the OpenAI-compatible endpoint"
    )
    model: str = Field(default="gpt-5.1", description="Chat completion model identifier")
    max_completion_tokens: int = Field(default=2048, gt=0)
    openai_timeout: float = Field(default=60.0, gt=0, description="Seconds")

    # GitHub
    github_base_url: str = Field(default="https://api.github.com")
    github_user_agent: str = Field(default="Changelog-Generator")
    github_timeout: int = Field(default=15, gt=0, description="Seconds")
    max_commits: int = Field(
        default=30,
        gt=0,
        le=100,
        description="Commits taken from the list endpoint (one page)"
    )


@lru_cache()
def get_settings() -> ChangelogSettings:
    """Return the process-wide settings, loaded once."""
    return ChangelogSettings()
