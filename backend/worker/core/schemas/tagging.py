from __future__ import annotations

from pydantic import Field

from worker.core.models.base import AppBaseModel


class GeneratedTags(AppBaseModel):
    """Structured output requested from every model provider."""

    tags: list[str] = Field(
        description="Tags for the bookmark, at most 5, one to two words each",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "tags": ["Cooking", "Recipes", "Italian"]
                }
            ]
        }
    }


class PromptContent(AppBaseModel):
    """Page fields injected into the prompt. Absent values are empty strings."""

    title: str = ""
    description: str = ""
    text: str = ""
