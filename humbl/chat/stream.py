"""Server-sent event frames exchanged by the search stream."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Literal, Optional

StreamEventType = Literal["content", "citations", "done", "error"]

FRAME_PREFIX = "data:"


@dataclass(slots=True)
class StreamEvent:
    """One ``data: {json}`` frame of the search stream."""

    type: StreamEventType
    data: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return dict(self.data)

    def encode(self) -> bytes:
        payload = json.dumps(self.as_dict(), ensure_ascii=False)
        return f"{FRAME_PREFIX} {payload}\n\n".encode("utf-8")

    @property
    def text(self) -> str:
        return str(self.data.get("content") or "")

    @property
    def citations_list(self) -> list[dict[str, str]]:
        citations = self.data.get("citations")
        return list(citations) if isinstance(citations, list) else []

    @classmethod
    def content(cls, *, text: str) -> "StreamEvent":
        return cls("content", {"content": text})

    @classmethod
    def citations(cls, *, citations: list[dict[str, str]]) -> "StreamEvent":
        return cls("citations", {"citations": citations})

    @classmethod
    def done(cls, *, citations: list[dict[str, str]] | None = None) -> "StreamEvent":
        if citations is None:
            return cls("done", {"done": True})
        return cls("done", {"citations": citations, "done": True})

    @classmethod
    def error(cls, *, message: str) -> "StreamEvent":
        return cls("error", {"error": message})

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["StreamEvent"]:
        """Classify a decoded frame; unknown shapes yield ``None``."""

        if not isinstance(payload, dict):
            return None
        if payload.get("error"):
            return cls("error", {"error": str(payload["error"])})
        citations = payload.get("citations")
        citation_items = (
            [normalise_citation(item) for item in citations if isinstance(item, dict)]
            if isinstance(citations, list)
            else None
        )
        if payload.get("done") is True:
            return cls.done(citations=citation_items)
        if citation_items is not None:
            return cls.citations(citations=citation_items)
        content = payload.get("content")
        if isinstance(content, str):
            return cls.content(text=content)
        return None


def normalise_citation(item: dict[str, Any]) -> dict[str, str]:
    return {"title": str(item.get("title") or "Source"), "url": str(item.get("url") or "#")}


__all__ = ["StreamEvent", "StreamEventType", "FRAME_PREFIX", "normalise_citation"]
