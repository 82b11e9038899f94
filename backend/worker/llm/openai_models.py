from __future__ import annotations

from typing import TYPE_CHECKING

from worker.core.errors import TagGenerationError
from worker.core.schemas.tagging import GeneratedTags
from worker.llm.base import TAGS_SYSTEM_HINT, TagModel
from worker.utils.logging import get_logger

if TYPE_CHECKING:
    from openai import AsyncOpenAI

logger = get_logger(__name__)


class OpenAIResponsesTagModel(TagModel):
    """Tags through the OpenAI Responses API with a parsed `GeneratedTags` output."""

    provider = "openai"

    def __init__(self, client: AsyncOpenAI, model: str) -> None:
        super().__init__(model)
        self._client = client

    async def generate_tags(self, prompt: str) -> list[str]:
        logger.info("Making OpenAI API call for tagging with model %s", self.model)

        response = await self._client.responses.parse(
            model=self.model,
            input=[
                {
                    "role": "system",
                    "content": TAGS_SYSTEM_HINT,
                },
                {
                    "role": "user",
                    "content": prompt,
                },
            ],
            text_format=GeneratedTags,
        )

        result = response.output_parsed
        if result is None:
            raise TagGenerationError("Model response could not be parsed into tags")

        logger.debug("OpenAI response parsed - tags: %s", result.tags)
        return list(result.tags)


class OpenAIChatTagModel(TagModel):
    """Tags through an OpenAI compatible chat completions endpoint.

    Used for Azure OpenAI deployments and OpenRouter, which both accept the
    `response_format` JSON schema but not the Responses API.
    """

    def __init__(self, client: AsyncOpenAI, model: str, *, provider: str) -> None:
        super().__init__(model)
        self._client = client
        self.provider = provider

    async def generate_tags(self, prompt: str) -> list[str]:
        logger.info("Making %s chat completion call for tagging with model %s", self.provider, self.model)

        completion = await self._client.chat.completions.parse(
            model=self.model,
            messages=[
                {"role": "system", "content": TAGS_SYSTEM_HINT},
                {"role": "user", "content": prompt},
            ],
            response_format=GeneratedTags,
        )

        if not completion.choices:
            raise TagGenerationError(f"{self.provider} returned no choices")

        message = completion.choices[0].message
        if getattr(message, "refusal", None):
            raise TagGenerationError(f"Model refused to tag the link: {message.refusal}")
        if message.parsed is None:
            raise TagGenerationError("Model response could not be parsed into tags")

        logger.debug("%s response parsed - tags: %s", self.provider, message.parsed.tags)
        return list(message.parsed.tags)
