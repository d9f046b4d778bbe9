"""Retry flavors and the rules for recovering the inputs of an earlier turn."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .session import ConversationSession


class RetryFlavor(str, Enum):
    try_again = "try-again"
    add_details = "add-details"
    more_concise = "more-concise"
    think_longer = "think-longer"
    search_web = "search-web"
    custom = "custom"


RETRY_SUFFIXES = {
    RetryFlavor.add_details: "\n\nPlease provide more details and expand on this topic.",
    RetryFlavor.more_concise: "\n\nPlease provide a more concise response.",
    RetryFlavor.think_longer: "\n\nPlease think step by step and provide a thorough analysis.",
}


@dataclass(slots=True)
class RetryInputs:
    query: str
    images: list[str] = field(default_factory=list)
    mode: str = "default"


def transform_query(
    flavor: RetryFlavor, query: str, mode: str, custom_prompt: str | None = None
) -> tuple[str, str]:
    """Apply a retry flavor to the recovered query, returning ``(query, mode)``."""

    flavor = RetryFlavor(flavor)
    if flavor is RetryFlavor.search_web:
        return query, "search"
    if flavor is RetryFlavor.custom:
        prompt = (custom_prompt or "").strip()
        return (prompt or query), mode
    return query + RETRY_SUFFIXES.get(flavor, ""), mode


def resolve_retry_inputs(
    session: ConversationSession, index: int, custom_prompt: str | None = None
) -> Optional[RetryInputs]:
    """Recover the query, images and mode that produced the message at ``index``.

    A recorded ``original_query`` wins; otherwise the nearest earlier user
    message is used. Returns ``None`` for user turns and when there is
    nothing to resubmit.
    """

    if not 0 <= index < len(session):
        return None
    target = session[index]
    if target.role != "assistant":
        return None
    query = target.original_query or ""
    images = list(target.original_images or [])
    mode = target.original_mode or "default"
    custom = (custom_prompt or "").strip()
    if not query and not custom:
        for position in range(index - 1, -1, -1):
            candidate = session[position]
            if candidate.role == "user":
                query = candidate.content
                images = list(candidate.images)
                break
    if not query and not custom and not images:
        return None
    return RetryInputs(query=query, images=images, mode=mode)


__all__ = ["RetryFlavor", "RetryInputs", "RETRY_SUFFIXES", "resolve_retry_inputs", "transform_query"]
