from __future__ import annotations

from abc import ABC, abstractmethod

TAGS_SYSTEM_HINT = "Respond with the tags for the bookmark using the requested structured format."


class TagModel(ABC):
    """A language model that can answer a tagging prompt with a list of tags.

    Implementations perform network I/O and therefore expose async methods.
    They raise on transport/auth errors and raise `TagGenerationError` when the
    answer cannot be read as a list of strings.
    """

    provider: str = "unknown"

    def __init__(self, model: str) -> None:
        self.model = model

    @abstractmethod
    async def generate_tags(self, prompt: str) -> list[str]:  # pragma: no cover - interface only
        """Send the prompt and return the raw tags suggested by the model."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider={self.provider!r}, model={self.model!r})"
