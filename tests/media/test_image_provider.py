"""Image provider credential chain tests."""
from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from humbl.config import Settings
from humbl.exceptions import BudgetExhaustedError, ProviderError
from humbl.infrastructure.providers.images import (
    ALL_FAILED_MESSAGE,
    NO_KEYS_MESSAGE,
    ImageGenerationError,
    ProviderImageClient,
)


def _settings(*reve_keys: str, gemini_key: str | None = None) -> Settings:
    settings = Settings()
    settings.images.reve_api_keys = list(reve_keys)
    settings.images.gemini_api_key = gemini_key
    return settings


def test_budget_exhausted_key_moves_to_next_key() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        key = request.headers["Authorization"].removeprefix("Bearer ")
        seen.append(key)
        if key == "first":
            return httpx.Response(402, json={"message": "Payment required"})
        if key == "second":
            return httpx.Response(400, json={"message": "Insufficient funds on account"})
        body = json.loads(request.content)
        assert body["edit_instruction"] == "make it blue"
        return httpx.Response(200, json={"image": "QUJD", "request_id": "r-9", "credits_remaining": 41})

    client = ProviderImageClient(_settings("first", "second", "third"), transport=httpx.MockTransport(handler))
    result = asyncio.run(client.edit("make it blue", "QUJD"))

    assert seen == ["first", "second", "third"]
    assert result.image_url == "data:image/png;base64,QUJD"
    assert result.request_id == "r-9"
    assert result.credits_remaining == 41


def test_all_keys_exhausted_raises_budget_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(402, json={"message": "budget exceeded"})

    client = ProviderImageClient(_settings("first", "second"), transport=httpx.MockTransport(handler))
    with pytest.raises(BudgetExhaustedError):
        asyncio.run(client.remix("merge", ["QQ==", "Qg=="]))


def test_content_violation_is_reported() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"content_violation": True})

    client = ProviderImageClient(_settings("only"), transport=httpx.MockTransport(handler))
    with pytest.raises(ProviderError) as excinfo:
        asyncio.run(client.edit("bad", "QUJD"))
    assert excinfo.value.status_code == 400
    assert str(excinfo.value) == "Content policy violation detected"


def test_generate_without_keys_fails_fast() -> None:
    client = ProviderImageClient(_settings())
    with pytest.raises(ImageGenerationError) as excinfo:
        asyncio.run(client.generate("fox"))
    assert str(excinfo.value) == NO_KEYS_MESSAGE


def test_generate_prefers_gemini_and_falls_back_to_reve() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.host)
        if request.url.host == "generativelanguage.googleapis.com":
            return httpx.Response(500, json={"error": {"message": "overloaded"}})
        body = json.loads(request.content)
        assert body["aspect_ratio"] == "1:1"
        return httpx.Response(200, json={"image": "RkFMTEJBQ0s="})

    client = ProviderImageClient(_settings("reve", gemini_key="gemini"), transport=httpx.MockTransport(handler))
    result = asyncio.run(client.generate("fox"))

    assert seen == ["generativelanguage.googleapis.com", "api.reve.com"]
    assert result.image_url == "data:image/png;base64,RkFMTEJBQ0s="


def test_generate_returns_gemini_inline_image() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["key"] == "gemini"
        return httpx.Response(
            200,
            json={
                "candidates": [
                    {"content": {"parts": [{"text": "here"}, {"inlineData": {"mimeType": "image/jpeg", "data": "R0VN"}}]}}
                ]
            },
        )

    client = ProviderImageClient(_settings(gemini_key="gemini"), transport=httpx.MockTransport(handler))
    assert asyncio.run(client.generate("fox")).image_url == "data:image/jpeg;base64,R0VN"


def test_generate_reports_all_failed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "server error"})

    client = ProviderImageClient(_settings("reve"), transport=httpx.MockTransport(handler))
    with pytest.raises(ImageGenerationError) as excinfo:
        asyncio.run(client.generate("fox"))
    assert str(excinfo.value) == ALL_FAILED_MESSAGE


def test_malformed_gemini_body_falls_back_to_reve() -> None:
    hosts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        hosts.append(request.url.host)
        if request.url.host == "generativelanguage.googleapis.com":
            return httpx.Response(200, text="<html>gateway hiccup</html>")
        return httpx.Response(200, json={"image": "UkVWRQ=="})

    client = ProviderImageClient(_settings("reve-key", gemini_key="g-key"), transport=httpx.MockTransport(handler))
    result = asyncio.run(client.generate("a lighthouse"))

    assert hosts == ["generativelanguage.googleapis.com", "api.reve.com"]
    assert result.image_url == "data:image/png;base64,UkVWRQ=="


def test_non_object_reve_body_moves_to_next_key() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.headers["Authorization"] == "Bearer first":
            return httpx.Response(200, json=["unexpected"])
        return httpx.Response(200, json={"image": "QUJD"})

    client = ProviderImageClient(_settings("first", "second"), transport=httpx.MockTransport(handler))
    result = asyncio.run(client.edit("sharpen", "QUJD"))

    assert result.image_url == "data:image/png;base64,QUJD"
