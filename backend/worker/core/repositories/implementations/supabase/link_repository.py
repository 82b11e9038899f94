from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from worker.core.models.link import Link, TagUsage
from worker.core.repositories.link_repository import LinkRepository
from worker.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from supabase import Client


class SupabaseLinkRepository(LinkRepository):
    """Supabase implementation of the LinkRepository.

    Assumes `links`, `tags` (unique on `name, owner_id`) and the `link_tags`
    join table (unique on `link_id, tag_id`). PostgREST has no multi-statement
    transactions, so `attach_tags` writes the `ai_tagged` flag last: a crash
    part way leaves the link untagged and eligible for another run.
    """

    LINKS_TABLE = "links"
    TAGS_TABLE = "tags"
    LINK_TAGS_TABLE = "link_tags"
    PAGE_SIZE = 1000

    def __init__(self, client: Client) -> None:
        self._client: Client = client

    async def get(self, link_id: int) -> Link | None:
        resp = await self._run(
            lambda: self._client.table(self.LINKS_TABLE)
            .select("*, tags(id, name, owner_id)")
            .eq("id", link_id)
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_link(items[0])

    async def list_tag_usage(self, owner_id: int) -> Sequence[TagUsage]:
        usage: list[TagUsage] = []
        offset = 0

        while True:
            def _fetch_page(start: int, size: int) -> Any:
                return (
                    self._client.table(self.TAGS_TABLE)
                    .select(f"name, {self.LINK_TAGS_TABLE}(count)")
                    .eq("owner_id", owner_id)
                    .order("name")
                    .range(start, start + size - 1)
                    .execute()
                )

            resp = await asyncio.to_thread(_fetch_page, offset, self.PAGE_SIZE)
            rows: list[dict[str, Any]] = resp.data or []
            usage.extend(self._row_to_usage(row) for row in rows)

            if len(rows) < self.PAGE_SIZE:
                break
            offset += self.PAGE_SIZE

        # PostgREST cannot order by an embedded count; sort is stable so ties stay by name
        return sorted(usage, key=lambda u: u.link_count, reverse=True)

    async def attach_tags(self, *, link_id: int, owner_id: int, names: Sequence[str]) -> None:
        # Postgres rejects an upsert touching the same conflict key twice
        unique_names = list(dict.fromkeys(names))
        if not unique_names:
            return

        tag_rows = [{"name": name, "owner_id": owner_id} for name in unique_names]
        tags_resp = await self._run(
            lambda: self._client.table(self.TAGS_TABLE)
            .upsert(tag_rows, on_conflict="name,owner_id")
            .execute()
        )
        tag_ids = [row["id"] for row in (tags_resp.data or [])]
        if len(tag_ids) != len(unique_names):
            raise RuntimeError(
                f"Expected {len(unique_names)} tags for owner {owner_id}, got {len(tag_ids)}"
            )
        logger.debug("Upserted tags %s for owner %s -> ids %s", unique_names, owner_id, tag_ids)

        link_rows = [{"link_id": link_id, "tag_id": tag_id} for tag_id in tag_ids]
        await self._run(
            lambda: self._client.table(self.LINK_TAGS_TABLE)
            .upsert(link_rows, on_conflict="link_id,tag_id", ignore_duplicates=True)
            .execute()
        )

        await self._run(
            lambda: self._client.table(self.LINKS_TABLE)
            .update({"ai_tagged": True})
            .eq("id", link_id)
            .execute()
        )

    @staticmethod
    async def _run(func: Callable[[], Any]) -> Any:
        return await asyncio.to_thread(func)

    @staticmethod
    def _row_to_link(row: dict[str, Any]) -> Link:
        normalized = dict(row)
        if normalized.get("tags") is None:
            normalized["tags"] = []
        if normalized.get("ai_tagged") is None:
            normalized["ai_tagged"] = False
        return Link.model_validate(normalized)

    @staticmethod
    def _row_to_usage(row: dict[str, Any]) -> TagUsage:
        # Embedded aggregate comes back as [{"count": n}]
        counts = row.get("link_tags") or []
        link_count = counts[0].get("count", 0) if counts else 0
        return TagUsage(name=row["name"], link_count=link_count)
