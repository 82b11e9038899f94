from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from anthropic import AsyncAnthropic
from openai import AsyncAzureOpenAI, AsyncOpenAI

from worker.config import Settings, get_settings
from worker.core.errors import NoProviderConfiguredError
from worker.llm import (
    AnthropicTagModel,
    OllamaTagModel,
    OpenAIChatTagModel,
    OpenAIResponsesTagModel,
    ensure_valid_url,
)
from worker.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from worker.llm import TagModel

logger = get_logger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


@dataclass(frozen=True)
class ProviderDefinition:
    """A model provider and the settings that must all be set to use it."""

    name: str
    required: tuple[str, ...]
    build: Callable[[Settings], TagModel]

    def is_configured(self, settings: Settings) -> bool:
        return all(getattr(settings, field, None) for field in self.required)


def _build_openai(settings: Settings) -> TagModel:
    client = AsyncOpenAI(api_key=settings.openai_api_key)
    return OpenAIResponsesTagModel(client, settings.openai_model)


def _build_azure(settings: Settings) -> TagModel:
    client = AsyncAzureOpenAI(
        api_key=settings.azure_api_key,
        azure_endpoint=f"https://{settings.azure_resource_name}.openai.azure.com",
        api_version=settings.azure_api_version,
    )
    return OpenAIChatTagModel(client, settings.azure_model, provider="azure")


def _build_anthropic(settings: Settings) -> TagModel:
    client = AsyncAnthropic(api_key=settings.anthropic_api_key)
    return AnthropicTagModel(client, settings.anthropic_model)


def _build_ollama(settings: Settings) -> TagModel:
    base_url = ensure_valid_url(settings.ollama_endpoint_url, "api")
    return OllamaTagModel(base_url, settings.ollama_model)


def _build_openrouter(settings: Settings) -> TagModel:
    client = AsyncOpenAI(api_key=settings.openrouter_api_key, base_url=OPENROUTER_BASE_URL)
    return OpenAIChatTagModel(client, settings.openrouter_model, provider="openrouter")


# Checked in order; the first fully configured provider is used.
PROVIDERS: tuple[ProviderDefinition, ...] = (
    ProviderDefinition("openai", ("openai_api_key", "openai_model"), _build_openai),
    ProviderDefinition("azure", ("azure_api_key", "azure_resource_name", "azure_model"), _build_azure),
    ProviderDefinition("anthropic", ("anthropic_api_key", "anthropic_model"), _build_anthropic),
    ProviderDefinition("ollama", ("ollama_endpoint_url", "ollama_model"), _build_ollama),
    ProviderDefinition("openrouter", ("openrouter_api_key", "openrouter_model"), _build_openrouter),
)


def resolve_tag_model(
    settings: Settings | None = None,
    providers: tuple[ProviderDefinition, ...] = PROVIDERS,
) -> TagModel:
    """Return a model handle for the first configured provider.

    Raises `NoProviderConfiguredError` when no provider has all of its
    settings, which an operator has to fix; it is never retried.
    """
    settings = settings or get_settings()
    for provider in providers:
        if provider.is_configured(settings):
            model = provider.build(settings)
            logger.info("Using %s provider for auto tagging: %r", provider.name, model)
            return model
    raise NoProviderConfiguredError()
