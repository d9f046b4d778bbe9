"""Chat service streaming Groq completions as server-sent events."""
from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from time import perf_counter
from typing import Any

from fastapi import HTTPException, status

from ..config import Settings
from ..exceptions import ProviderError
from ..infrastructure.providers.base import ChatClient, ChatMessage
from .constants import (
    API_KEY_MISSING_MESSAGE,
    FALLBACK_STATUS_CODES,
    MAX_CITATIONS,
    MAX_HISTORY_MESSAGES,
    NO_SEARCH_DEFAULT_ANSWER,
    NO_SEARCH_SYSTEM_PROMPT,
    QUERY_REQUIRED_MESSAGE,
    SEARCH_DOMAINS,
    SEARCH_SYSTEM_PROMPT,
    SERVICE_UNAVAILABLE_MESSAGE,
    SYSTEM_PROMPT,
    TITLE_FALLBACK_CHARS,
    TITLE_RESPONSE_EXCERPT_CHARS,
    TITLE_SYSTEM_PROMPT,
    WEB_SEARCH_FAILED_MESSAGE,
)
from .schemas import GenerateTitleRequest, SearchRequest
from .stream import StreamEvent, normalise_citation

LOGGER = logging.getLogger(__name__)


class ChatService:
    """Answer queries through the primary/fallback chat models or web search."""

    def __init__(self, client: ChatClient, settings: Settings, *, api_key_configured: bool = True) -> None:
        self.client = client
        self.settings = settings
        self.api_key_configured = api_key_configured

    def _primary_options(self) -> dict[str, Any]:
        return {
            "temperature": 0.6,
            "max_completion_tokens": self.settings.llm.max_completion_tokens,
            "top_p": 1,
        }

    def _fallback_options(self) -> dict[str, Any]:
        return {
            "temperature": 0.6,
            "max_completion_tokens": self.settings.llm.max_completion_tokens,
            "top_p": 0.95,
        }

    async def stream_search(self, request: SearchRequest) -> AsyncGenerator[bytes, None]:
        """Validate ``request`` and return the encoded event stream."""

        query = request.query.strip()
        if not query and not request.images:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=QUERY_REQUIRED_MESSAGE)
        if not self.api_key_configured:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=API_KEY_MISSING_MESSAGE)

        history = self._history_messages(request)
        images = request.images[: self.settings.llm.max_images]

        async def _stream() -> AsyncGenerator[bytes, None]:
            LOGGER.info(
                "Search stream started | mode=%s query_chars=%d images=%d history=%d",
                request.mode,
                len(query),
                len(images),
                len(history),
            )
            stream_start = perf_counter()
            deltas = 0
            characters = 0
            try:
                if request.mode == "search":
                    events = self._web_search(query, history)
                else:
                    events = self._chat(query, images, history)
                async for event in events:
                    if event.type == "content":
                        deltas += 1
                        characters += len(event.text)
                    yield event.encode()
            except ProviderError as exc:
                LOGGER.exception("Search stream failed | mode=%s", request.mode, exc_info=exc)
                yield StreamEvent.error(message=SERVICE_UNAVAILABLE_MESSAGE).encode()
            finally:
                LOGGER.info(
                    "Search stream finished | mode=%s duration=%.2fs deltas=%d characters=%d",
                    request.mode,
                    perf_counter() - stream_start,
                    deltas,
                    characters,
                )

        return _stream()

    def _history_messages(self, request: SearchRequest) -> list[ChatMessage]:
        recent = [item for item in request.conversation_history if item.content.strip()]
        return [{"role": item.role, "content": item.content} for item in recent[-MAX_HISTORY_MESSAGES:]]

    @staticmethod
    def _user_content(query: str, images: list[str]) -> list[dict[str, Any]]:
        parts: list[dict[str, Any]] = []
        if query:
            parts.append({"type": "text", "text": query})
        for image in images:
            parts.append({"type": "image_url", "image_url": {"url": image}})
        return parts or [{"type": "text", "text": query}]

    async def _chat(
        self, query: str, images: list[str], history: list[ChatMessage]
    ) -> AsyncGenerator[StreamEvent, None]:
        messages: list[ChatMessage] = [
            {"role": "system", "content": SYSTEM_PROMPT},
            *history,
            {"role": "user", "content": self._user_content(query, images)},
        ]
        llm = self.settings.llm
        emitted = False
        try:
            async for delta in self.client.stream(messages, model=llm.primary_model, **self._primary_options()):
                emitted = True
                yield StreamEvent.content(text=delta)
        except ProviderError as exc:
            if emitted or exc.status_code not in FALLBACK_STATUS_CODES:
                raise
            LOGGER.info(
                "Primary model rejected request, trying fallback | status=%s fallback=%s",
                exc.status_code,
                llm.fallback_model,
            )
            async for delta in self.client.stream(messages, model=llm.fallback_model, **self._fallback_options()):
                yield StreamEvent.content(text=delta)
        yield StreamEvent.done()

    async def _web_search(self, query: str, history: list[ChatMessage]) -> AsyncGenerator[StreamEvent, None]:
        messages: list[ChatMessage] = [
            {"role": "system", "content": SEARCH_SYSTEM_PROMPT},
            *history,
            {"role": "user", "content": query},
        ]
        for model in self.settings.llm.search_models:
            try:
                completion = await self.client.complete(
                    messages, model=model, search_settings={"include_domains": SEARCH_DOMAINS}
                )
            except ProviderError as exc:
                LOGGER.warning("Web search model failed | model=%s error=%s", model, exc)
                continue
            citations = [normalise_citation(item) for item in completion.search_results][:MAX_CITATIONS]
            if completion.content:
                yield StreamEvent.content(text=completion.content)
            yield StreamEvent.done(citations=citations)
            return

        LOGGER.warning("Web search unavailable, answering without search | model=%s", self.settings.llm.primary_model)
        degraded = [{"role": "system", "content": NO_SEARCH_SYSTEM_PROMPT}, {"role": "user", "content": query}]
        try:
            completion = await self.client.complete(
                degraded, model=self.settings.llm.primary_model, **self._primary_options()
            )
        except ProviderError as exc:
            LOGGER.error("Answer without web search failed | error=%s", exc)
            yield StreamEvent.error(message=WEB_SEARCH_FAILED_MESSAGE)
            return
        yield StreamEvent.content(text=completion.content or NO_SEARCH_DEFAULT_ANSWER)
        yield StreamEvent.done(citations=[])

    async def generate_title(self, request: GenerateTitleRequest) -> str:
        query = request.query.strip()
        if not query or not request.ai_response.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Query and AI response are required"
            )
        if not self.api_key_configured:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=API_KEY_MISSING_MESSAGE)
        excerpt = request.ai_response[:TITLE_RESPONSE_EXCERPT_CHARS]
        messages: list[ChatMessage] = [
            {"role": "system", "content": TITLE_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    f'User query: "{query}"\n\nAI response: "{excerpt}..."\n\n'
                    "Generate a short title for this conversation:"
                ),
            },
        ]
        try:
            completion = await self.client.complete(
                messages, model=self.settings.llm.title_model, temperature=0.7, max_tokens=20
            )
        except ProviderError as exc:
            LOGGER.error("Title generation failed | error=%s", exc)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to generate title"
            ) from exc
        title = completion.content.strip().strip('"').strip()
        return title or query[:TITLE_FALLBACK_CHARS]


__all__ = ["ChatService"]
