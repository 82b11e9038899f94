"""End-to-end tests for the auto tagging job with faked storage and models."""

import logging
from unittest.mock import patch

import pytest

from worker.background import auto_tag_link
from worker.background.auto_tag import build_link_text
from worker.core.errors import NoProviderConfiguredError, TagGenerationError
from worker.core.models.link import Owner, TaggingMethod


@pytest.mark.unit
def test_build_link_text():
    assert build_link_text(None, 500) == ""
    assert build_link_text("", 500) == ""
    assert build_link_text("short", 500) == "short..."
    assert build_link_text("abcdef", 3) == "abc..."


class TestSkips:
    @pytest.mark.asyncio
    async def test_missing_link_is_logged(self, generate_owner, repository, fake_model, caplog):
        model = fake_model(["AI"])

        with caplog.at_level(logging.WARNING):
            await auto_tag_link(generate_owner, 404, repository=repository, model=model)

        assert model.prompts == []
        assert "not found" in caplog.text

    @pytest.mark.asyncio
    async def test_predefined_without_tags_skips_generation(
        self, repository, supabase_client, fake_model, caplog
    ):
        owner = Owner(id=7, ai_tagging_method=TaggingMethod.PREDEFINED, ai_predefined_tags=[])
        model = fake_model(["Cooking"])

        with caplog.at_level(logging.INFO):
            await auto_tag_link(owner, 1, repository=repository, model=model)

        assert model.prompts == []
        assert "No predefined tags" in caplog.text
        assert supabase_client.link(1)["ai_tagged"] is False
        assert supabase_client.tables["tags"] == []

    @pytest.mark.asyncio
    async def test_predefined_without_tags_needs_no_provider(self, repository):
        """The skip happens before provider resolution, so no configuration is needed."""
        owner = Owner(id=7, ai_tagging_method=TaggingMethod.PREDEFINED)

        await auto_tag_link(owner, 1, repository=repository)

    @pytest.mark.asyncio
    async def test_empty_model_output_leaves_link_untouched(
        self, generate_owner, repository, supabase_client, fake_model
    ):
        await auto_tag_link(generate_owner, 1, repository=repository, model=fake_model([]))

        assert supabase_client.link(1)["ai_tagged"] is False
        assert ("links", "update") not in supabase_client.query_log

    @pytest.mark.asyncio
    async def test_nothing_accepted_leaves_link_untouched(
        self, predefined_owner, repository, supabase_client, fake_model
    ):
        await auto_tag_link(predefined_owner, 1, repository=repository, model=fake_model(["Gardening"]))

        assert supabase_client.link(1)["ai_tagged"] is False


class TestPrompt:
    @pytest.mark.asyncio
    async def test_prompt_uses_stored_text_truncated(
        self, generate_owner, repository, supabase_client, fake_model, monkeypatch
    ):
        monkeypatch.setenv("OLLAMA_TOKEN_LENGTH", "20")
        model = fake_model(["AI"])

        await auto_tag_link(
            generate_owner,
            1,
            "Meta description",
            "Caller supplied text",
            "Caller title",
            repository=repository,
            model=model,
        )

        prompt = model.prompts[0]
        stored = supabase_client.link(1)["text_content"]
        assert f"Text:\n{stored[:20]}...\n" in prompt
        assert "Caller supplied text" not in prompt
        assert "Title: Caller title" in prompt
        assert "Description: Meta description" in prompt

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["", "0"])
    async def test_blank_text_length_uses_default(
        self, generate_owner, repository, supabase_client, fake_model, monkeypatch, value
    ):
        monkeypatch.setenv("OLLAMA_TOKEN_LENGTH", value)
        model = fake_model(["AI"])

        await auto_tag_link(generate_owner, 1, repository=repository, model=model)

        stored = supabase_client.link(1)["text_content"]
        assert f"Text:\n{stored[:500]}...\n" in model.prompts[0]
        assert supabase_client.link(1)["ai_tagged"] is True

    @pytest.mark.asyncio
    async def test_default_text_length(self, generate_owner, repository, supabase_client, fake_model):
        model = fake_model(["AI"])

        await auto_tag_link(generate_owner, 1, repository=repository, model=model)

        stored = supabase_client.link(1)["text_content"]
        assert f"Text:\n{stored[:500]}...\n" in model.prompts[0]
        assert stored[:501] not in model.prompts[0]

    @pytest.mark.asyncio
    async def test_falls_back_to_link_fields(self, generate_owner, repository, supabase_client, fake_model):
        supabase_client.add_link(2, 7, "https://example.com/empty", name="Stored title")
        model = fake_model(["AI"])

        await auto_tag_link(generate_owner, 2, content="Fresh text", repository=repository, model=model)

        prompt = model.prompts[0]
        assert "Title: Stored title" in prompt
        assert "Description: \n" in prompt
        assert "Text:\nFresh text...\n" in prompt

    @pytest.mark.asyncio
    async def test_existing_method_shows_ranked_snapshot(
        self, existing_owner, repository, supabase_client, fake_model
    ):
        supabase_client.add_link(2, 7, "https://example.com/2")
        supabase_client.add_tag("Travel", 7, links=(2,))
        supabase_client.add_tag("Cooking", 7, links=(1, 2))
        model = fake_model(["Cooking"])

        await auto_tag_link(existing_owner, 1, repository=repository, model=model)

        assert "Existing Tags: Cooking, Travel." in model.prompts[0]

    @pytest.mark.asyncio
    async def test_instruction_override_is_read_per_call(
        self, generate_owner, repository, fake_model, monkeypatch
    ):
        model = fake_model(["AI"])

        await auto_tag_link(generate_owner, 1, repository=repository, model=model)
        monkeypatch.setenv("GENERATE_TAGS_PROMPT", "Tag it in Latin.")
        await auto_tag_link(generate_owner, 1, repository=repository, model=model)

        assert "Tag it in Latin." not in model.prompts[0]
        assert "Tag it in Latin." in model.prompts[1]


class TestTagging:
    @pytest.mark.asyncio
    async def test_generate_method_stores_normalized_tags(
        self, generate_owner, repository, supabase_client, fake_model
    ):
        raw = ["Cooking", "AI", "machine learning tips and tricks extra words"]

        await auto_tag_link(generate_owner, 1, repository=repository, model=fake_model(raw))

        assert supabase_client.tag_names_for_link(1) == [
            "Cooking",
            "AI",
            "Machine Learning Tips And Tricks Extra Words",
        ]
        assert supabase_client.link(1)["ai_tagged"] is True

    @pytest.mark.asyncio
    async def test_existing_method_only_attaches_known_tags(
        self, existing_owner, repository, supabase_client, fake_model
    ):
        supabase_client.add_tag("Cooking", 7)
        supabase_client.add_tag("Travel", 7)

        await auto_tag_link(
            existing_owner, 1, repository=repository, model=fake_model(["Cooking", "Pasta", "Travel"])
        )

        assert supabase_client.tag_names_for_link(1) == ["Cooking", "Travel"]
        assert len(supabase_client.tables["tags"]) == 2

    @pytest.mark.asyncio
    async def test_predefined_method_only_attaches_predefined_tags(
        self, predefined_owner, repository, supabase_client, fake_model
    ):
        await auto_tag_link(
            predefined_owner, 1, repository=repository, model=fake_model(["Cooking", "Food", "Travel"])
        )

        assert supabase_client.tag_names_for_link(1) == ["Cooking", "Travel"]

    @pytest.mark.asyncio
    async def test_caps_at_five(self, generate_owner, repository, supabase_client, fake_model):
        raw = ["One", "Two", "Six", "Ten", "Red", "Tan", "Big", "Sky"]

        await auto_tag_link(generate_owner, 1, repository=repository, model=fake_model(raw))

        assert supabase_client.tag_names_for_link(1) == ["One", "Two", "Six", "Ten", "Red"]

    @pytest.mark.asyncio
    async def test_second_run_reuses_tags(self, generate_owner, repository, supabase_client, fake_model):
        supabase_client.add_link(2, 7, "https://example.com/2", text_content="More pasta")
        model = fake_model(["Cooking", "pasta making"])

        await auto_tag_link(generate_owner, 1, repository=repository, model=model)
        await auto_tag_link(generate_owner, 1, repository=repository, model=model)
        await auto_tag_link(generate_owner, 2, repository=repository, model=model)

        names = sorted(t["name"] for t in supabase_client.tables["tags"])
        assert names == ["Cooking", "Pasta Making"]
        assert len(supabase_client.tables["link_tags"]) == 4
        assert supabase_client.tag_names_for_link(2) == ["Cooking", "Pasta Making"]

    @pytest.mark.asyncio
    async def test_link_with_long_stored_tag_is_tagged(
        self, generate_owner, repository, supabase_client, fake_model
    ):
        supabase_client.add_tag("z" * 60, 7, links=(1,))

        await auto_tag_link(generate_owner, 1, repository=repository, model=fake_model(["AI"]))

        assert supabase_client.tag_names_for_link(1) == ["z" * 60, "AI"]
        assert supabase_client.link(1)["ai_tagged"] is True


class TestErrors:
    @pytest.mark.asyncio
    async def test_no_provider_configured_propagates(self, generate_owner, repository, supabase_client):
        with pytest.raises(NoProviderConfiguredError):
            await auto_tag_link(generate_owner, 1, repository=repository)

        assert supabase_client.link(1)["ai_tagged"] is False

    @pytest.mark.asyncio
    async def test_provider_resolved_from_environment(
        self, generate_owner, repository, supabase_client, fake_model
    ):
        model = fake_model(["AI"])

        with patch("worker.background.auto_tag.resolve_tag_model", return_value=model) as resolve:
            await auto_tag_link(generate_owner, 1, repository=repository)

        resolve.assert_called_once()
        assert supabase_client.tag_names_for_link(1) == ["AI"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [RuntimeError("401 invalid api key"), TagGenerationError("not a list")],
    )
    async def test_provider_failure_propagates(
        self, generate_owner, repository, supabase_client, fake_model, error
    ):
        with pytest.raises(type(error)):
            await auto_tag_link(generate_owner, 1, repository=repository, model=fake_model(error=error))

        assert supabase_client.link(1)["ai_tagged"] is False
        assert supabase_client.tables["link_tags"] == []

    @pytest.mark.asyncio
    async def test_persistence_failure_is_logged_and_swallowed(
        self, generate_owner, repository, supabase_client, fake_model, caplog
    ):
        supabase_client.fail_writes_to.add("link_tags")

        with caplog.at_level(logging.ERROR):
            await auto_tag_link(generate_owner, 1, repository=repository, model=fake_model(["AI"]))

        assert "Error auto tagging link https://example.com/pasta" in caplog.text
        assert "write to link_tags failed" in caplog.text
        assert supabase_client.link(1)["ai_tagged"] is False
