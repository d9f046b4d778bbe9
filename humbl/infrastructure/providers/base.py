"""Provider client interfaces and normalised result types."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator, Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx

from ...exceptions import ProviderError

ChatMessage = dict[str, Any]


def json_object(response: httpx.Response, provider: str) -> dict[str, Any]:
    """Decode a JSON object body, raising :class:`ProviderError` for anything else."""

    try:
        data = response.json()
    except ValueError as exc:
        raise ProviderError(f"{provider} returned a malformed response", status_code=502) from exc
    if not isinstance(data, dict):
        raise ProviderError(f"{provider} returned a malformed response", status_code=502)
    return data


@dataclass(slots=True)
class ChatCompletion:
    """A non-streamed completion, including any web search results the model used."""

    content: str
    search_results: list[dict[str, Any]] = field(default_factory=list)


@dataclass(slots=True)
class ImageResult:
    """Generated image returned as a data URL plus optional billing metadata."""

    image_url: str
    request_id: str | None = None
    credits_used: float | None = None
    credits_remaining: float | None = None


class ChatClient(ABC):
    """Chat completion API supporting streamed and one-shot responses."""

    @abstractmethod
    def stream(self, messages: Sequence[ChatMessage], *, model: str, **options: Any) -> AsyncGenerator[str, None]:
        """Yield text deltas for the given conversation."""

    @abstractmethod
    async def complete(self, messages: Sequence[ChatMessage], *, model: str, **options: Any) -> ChatCompletion:
        """Return the full completion for the given conversation."""


class SpeechClient(ABC):
    """Speech-to-text and text-to-speech API."""

    @abstractmethod
    async def transcribe(self, audio: bytes, *, filename: str, content_type: str, model: str) -> str:
        """Return the transcript of ``audio``."""

    @abstractmethod
    async def synthesize(self, text: str, *, model: str, voice: str, response_format: str) -> bytes:
        """Return the encoded audio for ``text``."""


class ImageClient(ABC):
    """Image generation, editing and remixing."""

    @abstractmethod
    async def generate(self, prompt: str) -> ImageResult:
        """Create an image from a text prompt."""

    @abstractmethod
    async def edit(self, instruction: str, reference_image: str) -> ImageResult:
        """Edit a base64 encoded image following ``instruction``."""

    @abstractmethod
    async def remix(self, prompt: str, reference_images: Sequence[str]) -> ImageResult:
        """Combine reference images following ``prompt``."""


__all__ = ["ChatClient", "ChatCompletion", "ChatMessage", "ImageClient", "ImageResult", "SpeechClient"]
