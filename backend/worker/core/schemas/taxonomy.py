from __future__ import annotations

from pydantic import Field

from worker.core.models.base import AppBaseModel


class OwnerTagSnapshot(AppBaseModel):
    """Point-in-time view of a user's tag vocabulary.

    - tag_names: most used first, long names shortened for the prompt
    """

    tag_names: list[str] = Field(default_factory=list)
