"""Groq client for chat completions and audio via the OpenAI compatible REST API."""
from __future__ import annotations

import json
import logging
from collections.abc import AsyncGenerator, Sequence
from time import perf_counter
from typing import Any

import httpx

from ...config import Settings
from ...exceptions import ProviderError
from .base import ChatClient, ChatCompletion, ChatMessage, SpeechClient, json_object

LOGGER = logging.getLogger(__name__)


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
    return response.text


class GroqClient(ChatClient, SpeechClient):
    """Talk to Groq's OpenAI compatible endpoints."""

    def __init__(self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._base_url = settings.llm.base_url.rstrip("/")
        self._api_key = settings.llm.api_key
        self._timeout = settings.llm.request_timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _client(self, *, read_timeout: float | None) -> httpx.AsyncClient:
        timeout = httpx.Timeout(self._timeout, connect=self._timeout, read=read_timeout, write=self._timeout)
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            headers={"Authorization": f"Bearer {self._api_key}"},
            transport=self._transport,
        )

    async def stream(
        self, messages: Sequence[ChatMessage], *, model: str, **options: Any
    ) -> AsyncGenerator[str, None]:
        """Stream a chat completion, yielding content deltas."""

        payload = {"model": model, "messages": list(messages), "stream": True, **options}
        LOGGER.info("Groq stream started | model=%s messages=%d", model, len(messages))
        start_time = perf_counter()
        chunk_count = 0
        try:
            async with self._client(read_timeout=None) as client:
                async with client.stream("POST", "/chat/completions", json=payload) as response:
                    if response.is_error:
                        await response.aread()
                        raise ProviderError(
                            f"Groq stream failed with status {response.status_code}: {_error_detail(response)}",
                            status_code=response.status_code,
                        )
                    async for line in response.aiter_lines():
                        if not line:
                            continue
                        chunk = self._parse_line(line)
                        if chunk:
                            chunk_count += 1
                            LOGGER.debug("Groq streamed chunk | model=%s length=%d", model, len(chunk))
                            yield chunk
        except httpx.HTTPError as exc:
            raise ProviderError(f"Failed to reach Groq at {self._base_url}: {exc}") from exc
        finally:
            LOGGER.info(
                "Groq stream finished | model=%s duration=%.2fs chunks=%d",
                model,
                perf_counter() - start_time,
                chunk_count,
            )

    async def complete(self, messages: Sequence[ChatMessage], *, model: str, **options: Any) -> ChatCompletion:
        """Run a non-streamed completion and collect executed search results."""

        payload = {"model": model, "messages": list(messages), "stream": False, **options}
        start_time = perf_counter()
        data = await self._post_json("/chat/completions", payload)
        choices = data.get("choices") or []
        first = choices[0] if isinstance(choices, list) and choices else None
        message = first.get("message") if isinstance(first, dict) else None
        if not isinstance(message, dict):
            message = {}
        search_results: list[dict[str, Any]] = []
        executed = message.get("executed_tools") or []
        if executed and isinstance(executed[0], dict):
            results = executed[0].get("search_results")
            if isinstance(results, dict):
                results = results.get("results")
            if isinstance(results, list):
                search_results = [item for item in results if isinstance(item, dict)]
        content = message.get("content") or ""
        LOGGER.info(
            "Groq completion finished | model=%s duration=%.2fs characters=%d search_results=%d",
            model,
            perf_counter() - start_time,
            len(content),
            len(search_results),
        )
        return ChatCompletion(content=content, search_results=search_results)

    async def transcribe(self, audio: bytes, *, filename: str, content_type: str, model: str) -> str:
        files = {"file": (filename, audio, content_type)}
        data = {"model": model, "temperature": "0", "response_format": "verbose_json"}
        start_time = perf_counter()
        try:
            async with self._client(read_timeout=self._timeout) as client:
                response = await client.post("/audio/transcriptions", data=data, files=files)
        except httpx.HTTPError as exc:
            raise ProviderError(f"Failed to reach Groq at {self._base_url}: {exc}") from exc
        if response.is_error:
            raise ProviderError(
                f"Transcription failed with status {response.status_code}: {_error_detail(response)}",
                status_code=response.status_code,
            )
        text = str(json_object(response, "Groq").get("text") or "")
        LOGGER.info(
            "Groq transcription finished | model=%s bytes=%d duration=%.2fs",
            model,
            len(audio),
            perf_counter() - start_time,
        )
        return text

    async def synthesize(self, text: str, *, model: str, voice: str, response_format: str) -> bytes:
        payload = {"model": model, "voice": voice, "input": text, "response_format": response_format}
        try:
            async with self._client(read_timeout=self._timeout) as client:
                response = await client.post("/audio/speech", json=payload)
        except httpx.HTTPError as exc:
            raise ProviderError(f"Failed to reach Groq at {self._base_url}: {exc}") from exc
        if response.is_error:
            raise ProviderError(
                f"Speech synthesis failed with status {response.status_code}: {_error_detail(response)}",
                status_code=response.status_code,
            )
        audio = response.content
        LOGGER.info("Groq speech finished | model=%s characters=%d bytes=%d", model, len(text), len(audio))
        return audio

    async def _post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            async with self._client(read_timeout=self._timeout) as client:
                response = await client.post(path, json=payload)
        except httpx.HTTPError as exc:
            raise ProviderError(f"Failed to reach Groq at {self._base_url}: {exc}") from exc
        if response.is_error:
            raise ProviderError(
                f"Groq request failed with status {response.status_code}: {_error_detail(response)}",
                status_code=response.status_code,
            )
        return json_object(response, "Groq")

    @staticmethod
    def _parse_line(line: str) -> str:
        prefix = "data:"
        if not line.startswith(prefix):
            return ""
        data = line[len(prefix) :].strip()
        if not data or data == "[DONE]":
            return ""
        try:
            payload = json.loads(data)
        except json.JSONDecodeError:
            return ""
        choices = payload.get("choices") if isinstance(payload, dict) else None
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return ""
        delta = choices[0].get("delta")
        text = delta.get("content") if isinstance(delta, dict) else None
        return str(text) if text else ""


__all__ = ["GroqClient"]
