from __future__ import annotations

from enum import Enum

from pydantic import Field

from .base import AppBaseModel

MAX_TAG_NAME_LENGTH = 50


class TaggingMethod(str, Enum):
    """How a user wants their links tagged by the model."""

    GENERATE = "GENERATE"
    EXISTING = "EXISTING"
    PREDEFINED = "PREDEFINED"


class Tag(AppBaseModel):
    """Tag owned by a single user; names are unique per owner."""

    id: int | None = None
    name: str  # existing rows may be longer than MAX_TAG_NAME_LENGTH
    owner_id: int


class TagUsage(AppBaseModel):
    """A tag name with the number of links it is attached to."""

    name: str
    link_count: int = 0


class Owner(AppBaseModel):
    """The user a link belongs to, with their auto tagging preferences."""

    id: int
    ai_tagging_method: TaggingMethod = Field(default=TaggingMethod.GENERATE)
    ai_predefined_tags: list[str] = Field(default_factory=list)


class Link(AppBaseModel):
    """Saved bookmark."""

    id: int
    owner_id: int
    url: str

    # Filled in by the archiver before tagging runs
    name: str | None = Field(default=None, description="Page title")
    description: str | None = Field(default=None, description="Meta description")
    text_content: str | None = Field(default=None, description="Extracted readable text")

    ai_tagged: bool = Field(default=False, description="Whether auto tagging already ran")
    tags: list[Tag] = Field(default_factory=list)
