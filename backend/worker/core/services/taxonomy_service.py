from __future__ import annotations

from typing import TYPE_CHECKING

from worker.core.models.link import MAX_TAG_NAME_LENGTH
from worker.core.schemas.taxonomy import OwnerTagSnapshot
from worker.utils.logging import get_logger

if TYPE_CHECKING:
    from worker.core.repositories.link_repository import LinkRepository


logger = get_logger(__name__)

SNAPSHOT_LIMIT = 50


def shorten_tag_name(name: str, max_length: int = MAX_TAG_NAME_LENGTH) -> str:
    """Cut names longer than `max_length` to fit, ending with an ellipsis."""
    if len(name) <= max_length:
        return name
    return name[: max_length - 3] + "..."


async def build_owner_tag_snapshot(
    *,
    owner_id: int,
    repository: LinkRepository,
    limit: int = SNAPSHOT_LIMIT,
) -> OwnerTagSnapshot:
    """Rank a user's tags by how many links use them, most used first.

    Always read from storage so the ranking reflects the current state; the
    result is meant for a single tagging run.
    """
    usage = await repository.list_tag_usage(owner_id)
    tag_names = [shorten_tag_name(tag.name) for tag in list(usage)[:limit]]
    logger.debug("Tag snapshot for owner %s: %s", owner_id, tag_names)
    return OwnerTagSnapshot(tag_names=tag_names)
