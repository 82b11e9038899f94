from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TOKEN_LENGTH = 500


class Settings(BaseSettings):
    """Worker settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # Supabase
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None

    # OpenAI
    openai_api_key: str | None = None
    openai_model: str | None = None

    # Azure OpenAI
    azure_api_key: str | None = None
    azure_resource_name: str | None = None
    azure_model: str | None = None
    azure_api_version: str = "2024-10-21"

    # Anthropic
    anthropic_api_key: str | None = None
    anthropic_model: str | None = None

    # Ollama
    ollama_endpoint_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ollama_endpoint_url", "next_public_ollama_endpoint_url"),
    )
    ollama_model: str | None = None
    ollama_token_length: int = DEFAULT_TOKEN_LENGTH  # Max characters of link text sent to the model

    # OpenRouter
    openrouter_api_key: str | None = None
    openrouter_model: str | None = None

    # Instruction overrides, one per tagging method
    generate_tags_prompt: str | None = None
    generate_existing_tags_prompt: str | None = None
    generate_predefined_tags_prompt: str | None = None

    @field_validator("ollama_token_length")
    @classmethod
    def default_token_length(cls, v: int) -> int:
        """Zero or negative lengths fall back to the default."""
        return v if v > 0 else DEFAULT_TOKEN_LENGTH


def get_settings() -> Settings:
    """Read settings from the environment.

    Not cached: instruction overrides and provider keys are picked up on the
    next call without restarting the worker.
    """
    return Settings()
