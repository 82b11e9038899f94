from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError

from worker.core.errors import TagGenerationError
from worker.core.schemas.tagging import GeneratedTags
from worker.llm.base import TAGS_SYSTEM_HINT, TagModel
from worker.utils.logging import get_logger

if TYPE_CHECKING:
    from anthropic import AsyncAnthropic

logger = get_logger(__name__)

TOOL_NAME = "record_tags"


class AnthropicTagModel(TagModel):
    """Tags through the Anthropic Messages API.

    Structured output is obtained by forcing a single tool call whose input
    schema is `GeneratedTags`.
    """

    provider = "anthropic"

    def __init__(self, client: AsyncAnthropic, model: str, *, max_tokens: int = 1024) -> None:
        super().__init__(model)
        self._client = client
        self._max_tokens = max_tokens

    async def generate_tags(self, prompt: str) -> list[str]:
        logger.info("Making Anthropic API call for tagging with model %s", self.model)

        response = await self._client.messages.create(
            model=self.model,
            max_tokens=self._max_tokens,
            system=TAGS_SYSTEM_HINT,
            messages=[{"role": "user", "content": prompt}],
            tools=[
                {
                    "name": TOOL_NAME,
                    "description": "Record the tags for the bookmark.",
                    "input_schema": GeneratedTags.model_json_schema(),
                }
            ],
            tool_choice={"type": "tool", "name": TOOL_NAME},
        )

        for block in response.content:
            if getattr(block, "type", None) == "tool_use" and block.name == TOOL_NAME:
                try:
                    result = GeneratedTags.model_validate(block.input)
                except ValidationError as err:
                    raise TagGenerationError(f"Invalid tool input from Anthropic: {err}") from err
                logger.debug("Anthropic response parsed - tags: %s", result.tags)
                return list(result.tags)

        raise TagGenerationError("Anthropic response did not contain a tags tool call")
