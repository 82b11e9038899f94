from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from worker.core.models.link import Link, TagUsage


class LinkRepository(ABC):
    """Abstract repository interface for links and their tags.

    Contract used by the auto tagging job. Implementations should perform I/O
    (database, network) and therefore expose async methods.
    """

    @abstractmethod
    async def get(self, link_id: int) -> Link | None:  # pragma: no cover - interface only
        """Fetch a link by id or return None if not found."""

    @abstractmethod
    async def list_tag_usage(self, owner_id: int) -> Sequence[TagUsage]:  # pragma: no cover
        """Return all of the owner's tags with their link counts, most used first."""

    @abstractmethod
    async def attach_tags(self, *, link_id: int, owner_id: int, names: Sequence[str]) -> None:  # pragma: no cover
        """Connect the link to the owner's tags named `names` and mark it auto tagged.

        Tags missing for this owner are created, existing ones are reused.
        Does nothing when `names` is empty.
        """
