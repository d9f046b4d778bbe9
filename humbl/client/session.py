"""Client-held conversation state: messages, retry versions and the history window."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterator, Literal, Optional

MessageRole = Literal["user", "assistant"]
VersionDirection = Literal["prev", "next"]

HISTORY_LIMIT = 100
MAX_USER_IMAGES = 3


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class Citation:
    title: str
    url: str

    @classmethod
    def from_dict(cls, item: dict[str, Any]) -> "Citation":
        return cls(title=str(item.get("title") or "Source"), url=str(item.get("url") or "#"))

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "url": self.url}


@dataclass(slots=True)
class RetryVersion:
    """An alternate assistant completion kept next to the original."""

    content: str
    citations: list[Citation] = field(default_factory=list)
    timestamp: datetime = field(default_factory=_now)


@dataclass(eq=False)
class ConversationMessage:
    """One turn. Compared by identity so the controller can track it across mutations."""

    role: MessageRole
    content: str = ""
    images: list[str] = field(default_factory=list)
    citations: list[Citation] = field(default_factory=list)
    retry_versions: list[RetryVersion] = field(default_factory=list)
    current_retry_index: int = 0
    original_query: Optional[str] = None
    original_images: Optional[list[str]] = None
    original_mode: Optional[str] = None
    timestamp: datetime = field(default_factory=_now)

    @property
    def displayed_content(self) -> str:
        if self.current_retry_index == 0:
            return self.content
        return self.retry_versions[self.current_retry_index - 1].content

    @property
    def displayed_citations(self) -> list[Citation]:
        if self.current_retry_index == 0:
            return self.citations
        version = self.retry_versions[self.current_retry_index - 1]
        return version.citations or self.citations

    @property
    def version_count(self) -> int:
        return len(self.retry_versions) + 1

    def add_retry_version(self, content: str, citations: list[Citation] | None = None) -> RetryVersion:
        version = RetryVersion(content=content, citations=list(citations or []))
        self.retry_versions.append(version)
        self.current_retry_index = len(self.retry_versions)
        return version

    def select_version(self, direction: VersionDirection) -> int:
        step = -1 if direction == "prev" else 1
        self.current_retry_index = max(0, min(len(self.retry_versions), self.current_retry_index + step))
        return self.current_retry_index


class ConversationSession:
    """Ordered messages bounded to the most recent ``limit`` entries."""

    def __init__(self, *, limit: int = HISTORY_LIMIT, max_user_images: int = MAX_USER_IMAGES) -> None:
        self.limit = limit
        self.max_user_images = max_user_images
        self.started = False
        self.conversation_id: Optional[str] = None
        self._messages: list[ConversationMessage] = []

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ConversationMessage]:
        return iter(list(self._messages))

    def __getitem__(self, index: int) -> ConversationMessage:
        return self._messages[index]

    def snapshot(self) -> list[ConversationMessage]:
        return list(self._messages)

    def add(self, message: ConversationMessage) -> ConversationMessage:
        self._messages.append(message)
        overflow = len(self._messages) - self.limit
        if overflow > 0:
            del self._messages[:overflow]
        return message

    def add_user_message(self, content: str, images: list[str] | None = None) -> ConversationMessage:
        return self.add(
            ConversationMessage(role="user", content=content, images=list(images or [])[: self.max_user_images])
        )

    def add_assistant_message(self, content: str = "", **fields: Any) -> ConversationMessage:
        return self.add(ConversationMessage(role="assistant", content=content, **fields))

    def update(self, index: int, **changes: Any) -> ConversationMessage:
        message = self._messages[index]
        for name, value in changes.items():
            if not hasattr(message, name):
                raise AttributeError(f"ConversationMessage has no field {name!r}")
            setattr(message, name, value)
        return message

    def index_of(self, message: ConversationMessage) -> Optional[int]:
        for index, candidate in enumerate(self._messages):
            if candidate is message:
                return index
        return None

    def remove(self, target: int | ConversationMessage) -> bool:
        index = target if isinstance(target, int) else self.index_of(target)
        if index is None or not -len(self._messages) <= index < len(self._messages):
            return False
        del self._messages[index]
        return True

    def clear(self) -> None:
        self._messages.clear()

    def start(self, conversation_id: str | None = None) -> None:
        self.started = True
        self.conversation_id = conversation_id

    def end(self) -> None:
        """Mark the conversation finished; history stays until :meth:`clear`."""

        self.started = False


__all__ = [
    "Citation",
    "ConversationMessage",
    "ConversationSession",
    "HISTORY_LIMIT",
    "MAX_USER_IMAGES",
    "MessageRole",
    "RetryVersion",
]
