"""Groq client parsing tests against a mocked HTTP transport."""
from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from humbl.config import Settings
from humbl.exceptions import ProviderError
from humbl.infrastructure.providers.groq import GroqClient


def _client(handler) -> GroqClient:
    settings = Settings()
    settings.llm.api_key = "test-key"
    return GroqClient(settings, transport=httpx.MockTransport(handler))


def test_stream_yields_content_deltas() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer test-key"
        assert json.loads(request.content)["stream"] is True
        lines = [
            'data: {"choices": [{"delta": {"role": "assistant"}}]}',
            'data: {"choices": [{"delta": {"content": "Hel"}}]}',
            ": keep-alive",
            "data: not-json",
            'data: {"choices": [{"delta": {"content": "lo"}}]}',
            "data: [DONE]",
        ]
        return httpx.Response(200, text="\n\n".join(lines) + "\n\n")

    async def _collect() -> list[str]:
        return [chunk async for chunk in _client(handler).stream([{"role": "user", "content": "hi"}], model="m")]

    assert asyncio.run(_collect()) == ["Hel", "lo"]


def test_stream_error_carries_status_code() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": "Rate limit reached"}})

    async def _collect() -> list[str]:
        return [chunk async for chunk in _client(handler).stream([], model="m")]

    with pytest.raises(ProviderError) as excinfo:
        asyncio.run(_collect())
    assert excinfo.value.status_code == 429
    assert "Rate limit reached" in str(excinfo.value)


def test_complete_collects_search_results() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "choices": [
                    {
                        "message": {
                            "content": "Answer",
                            "executed_tools": [
                                {"search_results": {"results": [{"title": "A", "url": "https://a"}, "junk"]}}
                            ],
                        }
                    }
                ]
            },
        )

    completion = asyncio.run(_client(handler).complete([], model="groq/compound"))
    assert completion.content == "Answer"
    assert completion.search_results == [{"title": "A", "url": "https://a"}]


def test_transcribe_and_synthesize() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/audio/transcriptions"):
            assert b"whisper-large-v3" in request.content
            return httpx.Response(200, json={"text": "hello there"})
        payload = json.loads(request.content)
        assert payload["voice"] == "Fritz-PlayAI"
        return httpx.Response(200, content=b"RIFF")

    client = _client(handler)
    text = asyncio.run(
        client.transcribe(b"audio", filename="a.webm", content_type="audio/webm", model="whisper-large-v3")
    )
    audio = asyncio.run(client.synthesize("hi", model="playai-tts", voice="Fritz-PlayAI", response_format="wav"))

    assert text == "hello there"
    assert audio == b"RIFF"


def test_malformed_bodies_raise_provider_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/audio/transcriptions"):
            return httpx.Response(200, text="<html>proxy error</html>")
        return httpx.Response(200, json=["not", "an", "object"])

    client = _client(handler)
    with pytest.raises(ProviderError) as excinfo:
        asyncio.run(client.transcribe(b"audio", filename="a.webm", content_type="audio/webm", model="whisper"))
    assert str(excinfo.value) == "Groq returned a malformed response"

    with pytest.raises(ProviderError):
        asyncio.run(client.complete([{"role": "user", "content": "hi"}], model="m"))


def test_stream_skips_frames_that_are_not_objects() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        lines = ["data: 42", 'data: {"choices": ["x"]}', 'data: {"choices": [{"delta": {"content": "ok"}}]}']
        return httpx.Response(200, text="\n\n".join(lines) + "\n\n")

    async def _collect() -> list[str]:
        return [chunk async for chunk in _client(handler).stream([{"role": "user", "content": "hi"}], model="m")]

    assert asyncio.run(_collect()) == ["ok"]
