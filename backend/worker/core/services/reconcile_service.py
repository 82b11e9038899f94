from __future__ import annotations

import re
from typing import TYPE_CHECKING

from worker.core.models.link import MAX_TAG_NAME_LENGTH

if TYPE_CHECKING:
    from worker.core.services.tagging_policy import TaggingPolicy

MAX_TAGS = 5
ACRONYM_MAX_LENGTH = 3

_WORD = re.compile(r"\S+")


def title_case(text: str) -> str:
    """Capitalize the first letter of every whitespace separated word.

    Unlike `str.title`, letters after apostrophes or digits are left alone.
    """
    return _WORD.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:], text)


def keep_known_tags(raw_tags: list[str], vocabulary: list[str]) -> list[str]:
    """Drop every tag that is not exactly one of `vocabulary`."""
    allowed = set(vocabulary)
    return [tag for tag in raw_tags if tag in allowed]


def normalize_generated_tags(raw_tags: list[str], _vocabulary: list[str]) -> list[str]:
    """Title case free-form tags. Short tags are kept as is (AI, CSS, UX)."""
    return [
        title_case(tag.lower()) if len(tag) > ACRONYM_MAX_LENGTH else tag
        for tag in raw_tags
    ]


def reconcile_tags(
    policy: TaggingPolicy,
    raw_tags: list[str] | None,
    vocabulary: list[str],
) -> list[str]:
    """Turn raw model output into the tags that will be stored.

    The model is untrusted: output is filtered or normalized per policy, capped
    at `MAX_TAGS` and each name is trimmed to fit the tag name column.
    """
    if not raw_tags:
        return []

    tags = policy.select(list(raw_tags), vocabulary)[:MAX_TAGS]

    accepted: list[str] = []
    for tag in tags:
        name = tag.strip()[:MAX_TAG_NAME_LENGTH]
        if name:
            accepted.append(name)
    return accepted
