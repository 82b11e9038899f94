"""Shared pytest fixtures for the auto tagging worker tests."""

import pytest

from fakes import FakeSupabaseClient, FakeTagModel
from worker.core.models.link import Owner, TaggingMethod
from worker.core.repositories.implementations.supabase.link_repository import (
    SupabaseLinkRepository,
)

CONFIG_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "AZURE_API_KEY",
    "AZURE_RESOURCE_NAME",
    "AZURE_MODEL",
    "AZURE_API_VERSION",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_MODEL",
    "OLLAMA_ENDPOINT_URL",
    "NEXT_PUBLIC_OLLAMA_ENDPOINT_URL",
    "OLLAMA_MODEL",
    "OLLAMA_TOKEN_LENGTH",
    "OPENROUTER_API_KEY",
    "OPENROUTER_MODEL",
    "GENERATE_TAGS_PROMPT",
    "GENERATE_EXISTING_TAGS_PROMPT",
    "GENERATE_PREDEFINED_TAGS_PROMPT",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
)


# ============ Environment Setup ============


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Start every test without provider keys, overrides or a local .env file."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


# ============ Storage ============


@pytest.fixture
def supabase_client() -> FakeSupabaseClient:
    client = FakeSupabaseClient()
    client.add_link(
        1,
        owner_id=7,
        url="https://example.com/pasta",
        name="Fresh pasta at home",
        description="A guide to making pasta",
        text_content="Flour, eggs and patience. " * 40,
    )
    return client


@pytest.fixture
def repository(supabase_client) -> SupabaseLinkRepository:
    return SupabaseLinkRepository(supabase_client)


# ============ Owners ============


@pytest.fixture
def generate_owner() -> Owner:
    return Owner(id=7, ai_tagging_method=TaggingMethod.GENERATE)


@pytest.fixture
def existing_owner() -> Owner:
    return Owner(id=7, ai_tagging_method=TaggingMethod.EXISTING)


@pytest.fixture
def predefined_owner() -> Owner:
    return Owner(
        id=7,
        ai_tagging_method=TaggingMethod.PREDEFINED,
        ai_predefined_tags=["Cooking", "Travel", "Programming"],
    )


# ============ Models ============


@pytest.fixture
def fake_model():
    """Factory for a FakeTagModel returning the given tags."""

    def _make(tags=None, error=None) -> FakeTagModel:
        return FakeTagModel(tags, error=error)

    return _make
