from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from worker.core.errors import TagGenerationError
from worker.core.schemas.tagging import GeneratedTags
from worker.llm.base import TagModel
from worker.utils.logging import get_logger

logger = get_logger(__name__)


def ensure_valid_url(base: str, path: str) -> str:
    """Join a base URL and a path with exactly one slash between them."""
    return f"{base.removesuffix('/')}/{path.removeprefix('/')}"


class OllamaTagModel(TagModel):
    """Tags through a self-hosted Ollama server.

    `base_url` already points at the API root (`.../api`). Structured output is
    always requested by sending the `GeneratedTags` JSON schema as `format`.
    """

    provider = "ollama"

    def __init__(self, base_url: str, model: str, *, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(model)
        self.base_url = base_url
        self._client = client

    async def generate_tags(self, prompt: str) -> list[str]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "format": GeneratedTags.model_json_schema(),
            "stream": False,
        }
        url = ensure_valid_url(self.base_url, "chat")
        logger.info("Making Ollama call to %s for tagging with model %s", url, self.model)

        if self._client is not None:
            response = await self._client.post(url, json=payload)
        else:
            # No request timeout: local models can take a while on long pages
            async with httpx.AsyncClient(timeout=None) as client:
                response = await client.post(url, json=payload)
        response.raise_for_status()

        content = (response.json().get("message") or {}).get("content") or ""
        try:
            result = GeneratedTags.model_validate_json(content)
        except ValidationError as err:
            raise TagGenerationError(f"Ollama response could not be parsed into tags: {err}") from err

        logger.debug("Ollama response parsed - tags: %s", result.tags)
        return list(result.tags)
