from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from worker.core.models.link import TaggingMethod
from worker.core.services.prompt_service import (
    EXISTING_TAGS_INSTRUCTION,
    GENERATE_TAGS_INSTRUCTION,
    PREDEFINED_TAGS_INSTRUCTION,
    existing_tags_prompt,
    generate_tags_prompt,
    predefined_tags_prompt,
)
from worker.core.services.reconcile_service import keep_known_tags, normalize_generated_tags

if TYPE_CHECKING:
    from collections.abc import Callable

    from worker.config import Settings
    from worker.core.models.link import Owner
    from worker.core.schemas.tagging import PromptContent
    from worker.core.schemas.taxonomy import OwnerTagSnapshot


@dataclass(frozen=True)
class TaggingPolicy:
    """Everything that differs between the tagging methods.

    - instruction_setting: name of the `Settings` field overriding the default instruction
    - vocabulary: the tag list shown to the model and used for filtering
    - render: prompt template
    - select: filter or normalize raw model output against the vocabulary
    - requires_vocabulary: skip the model call when the vocabulary is empty
    """

    method: TaggingMethod
    instruction_setting: str
    default_instruction: str
    vocabulary: Callable[[Owner, OwnerTagSnapshot], list[str]]
    render: Callable[[str, PromptContent, list[str]], str]
    select: Callable[[list[str], list[str]], list[str]]
    requires_vocabulary: bool = False

    def resolve_instruction(self, settings: Settings) -> str:
        """Configured override if set, else the built-in instruction."""
        return getattr(settings, self.instruction_setting, None) or self.default_instruction

    def build_prompt(self, settings: Settings, content: PromptContent, vocabulary: list[str]) -> str:
        return self.render(self.resolve_instruction(settings), content, vocabulary)


def _snapshot_tags(owner: Owner, snapshot: OwnerTagSnapshot) -> list[str]:
    return list(snapshot.tag_names)


def _predefined_tags(owner: Owner, snapshot: OwnerTagSnapshot) -> list[str]:
    return list(owner.ai_predefined_tags)


POLICIES: dict[TaggingMethod, TaggingPolicy] = {
    TaggingMethod.GENERATE: TaggingPolicy(
        method=TaggingMethod.GENERATE,
        instruction_setting="generate_tags_prompt",
        default_instruction=GENERATE_TAGS_INSTRUCTION,
        vocabulary=_snapshot_tags,
        render=generate_tags_prompt,
        select=normalize_generated_tags,
    ),
    TaggingMethod.EXISTING: TaggingPolicy(
        method=TaggingMethod.EXISTING,
        instruction_setting="generate_existing_tags_prompt",
        default_instruction=EXISTING_TAGS_INSTRUCTION,
        vocabulary=_snapshot_tags,
        render=existing_tags_prompt,
        select=keep_known_tags,
    ),
    TaggingMethod.PREDEFINED: TaggingPolicy(
        method=TaggingMethod.PREDEFINED,
        instruction_setting="generate_predefined_tags_prompt",
        default_instruction=PREDEFINED_TAGS_INSTRUCTION,
        vocabulary=_predefined_tags,
        render=predefined_tags_prompt,
        select=keep_known_tags,
        requires_vocabulary=True,
    ),
}


def get_policy(method: TaggingMethod | str) -> TaggingPolicy:
    """Return the policy for a tagging method (enum member or its value)."""
    return POLICIES[TaggingMethod(method)]
