from __future__ import annotations

from typing import TYPE_CHECKING

from worker.config import get_settings
from worker.core.repositories.implementations.supabase.link_repository import (
    SupabaseLinkRepository,
)
from worker.core.schemas.tagging import PromptContent
from worker.core.services.provider_service import resolve_tag_model
from worker.core.services.reconcile_service import reconcile_tags
from worker.core.services.tagging_policy import get_policy
from worker.core.services.taxonomy_service import build_owner_tag_snapshot
from worker.db.base import get_supabase_admin_client
from worker.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from worker.core.models.link import Link, Owner
    from worker.core.repositories.link_repository import LinkRepository
    from worker.llm import TagModel


def build_link_text(text_content: str | None, max_length: int) -> str:
    """Cut the link text to `max_length` characters and mark the cut."""
    if not text_content:
        return ""
    return text_content[:max_length] + "..."


def build_prompt_content(
    link: Link,
    *,
    meta_description: str | None,
    content: str | None,
    link_title: str | None,
    max_text_length: int,
) -> PromptContent:
    """Collect the page fields for the prompt.

    The stored text content wins over the text passed by the caller, which is
    only used when nothing has been stored yet.
    """
    return PromptContent(
        title=link_title or link.name or "",
        description=meta_description or link.description or "",
        text=build_link_text(link.text_content or content, max_text_length),
    )


async def auto_tag_link(
    owner: Owner,
    link_id: int,
    meta_description: str | None = None,
    content: str | None = None,
    link_title: str | None = None,
    *,
    repository: LinkRepository | None = None,
    model: TagModel | None = None,
) -> None:
    """Background job to tag a link with a language model and persist the tags.

    Missing links and empty predefined tag lists are logged and skipped.
    Provider configuration and generation errors propagate. Errors while
    reconciling or storing tags are logged and swallowed, leaving the link
    untagged so a later run can retry it.
    """
    settings = get_settings()
    repo = repository or SupabaseLinkRepository(get_supabase_admin_client())

    link = await repo.get(link_id)
    if link is None:
        logger.warning("Link %s not found for auto tagging", link_id)
        return

    logger.info("Starting auto tagging for link %s (owner: %s, method: %s)",
                link.url, owner.id, owner.ai_tagging_method.value)

    prompt_content = build_prompt_content(
        link,
        meta_description=meta_description,
        content=content,
        link_title=link_title,
        max_text_length=settings.ollama_token_length,
    )

    snapshot = await build_owner_tag_snapshot(owner_id=owner.id, repository=repo)

    policy = get_policy(owner.ai_tagging_method)
    vocabulary = policy.vocabulary(owner, snapshot)
    prompt = policy.build_prompt(settings, prompt_content, vocabulary)

    logger.debug('Auto tagging "%s" with the following prompt: %s', link.url, prompt)

    if policy.requires_vocabulary and not vocabulary:
        logger.info("No predefined tags to auto tag for link: %s", link.url)
        return

    tag_model = model or resolve_tag_model(settings)
    raw_tags = await tag_model.generate_tags(prompt)
    logger.debug("Raw tags for link %s: %s", link.url, raw_tags)

    try:
        tags = reconcile_tags(policy, raw_tags, vocabulary)
        if not tags:
            logger.info("No tags accepted for link %s, skipping database update", link.url)
            return

        logger.info("Tags for link %s => %s", link.url, tags)
        await repo.attach_tags(link_id=link.id, owner_id=owner.id, names=tags)
        logger.info("Successfully auto tagged link %s", link.url)

    except Exception as err:
        logger.error("Error auto tagging link %s: %s", link.url, err)
        logger.error("Error type: %s", type(err).__name__)
