"""Image, transcription and speech endpoint tests."""
from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from humbl.config import Settings
from humbl.exceptions import BudgetExhaustedError, ProviderError
from humbl.infrastructure.providers.base import ImageClient, ImageResult, SpeechClient
from humbl.media.dependencies import get_media_service
from humbl.media.service import MediaService


class FakeImageClient(ImageClient):
    def __init__(self, error: ProviderError | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, Any]] = []

    async def _result(self, name: str, *args: Any) -> ImageResult:
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error
        return ImageResult(image_url="data:image/png;base64,aW1hZ2U=", request_id="req-1", credits_used=1.0)

    async def generate(self, prompt: str) -> ImageResult:
        return await self._result("generate", prompt)

    async def edit(self, instruction: str, reference_image: str) -> ImageResult:
        return await self._result("edit", instruction, reference_image)

    async def remix(self, prompt: str, reference_images: Sequence[str]) -> ImageResult:
        return await self._result("remix", prompt, list(reference_images))


class FakeSpeechClient(SpeechClient):
    def __init__(self, failing_models: Sequence[str] = ()) -> None:
        self.failing_models = set(failing_models)
        self.transcribed: list[str] = []
        self.spoken: list[tuple[str, str, str]] = []

    async def transcribe(self, audio: bytes, *, filename: str, content_type: str, model: str) -> str:
        self.transcribed.append(model)
        if model in self.failing_models:
            raise ProviderError("model unavailable", status_code=503)
        return f"heard {len(audio)} bytes"

    async def synthesize(self, text: str, *, model: str, voice: str, response_format: str) -> bytes:
        if model in self.failing_models:
            raise ProviderError("model unavailable", status_code=503)
        self.spoken.append((text, voice, response_format))
        return b"RIFF-audio"


def _override(
    app: FastAPI,
    images: ImageClient | None = None,
    speech: SpeechClient | None = None,
    *,
    speech_configured: bool = True,
) -> None:
    service = MediaService(
        images or FakeImageClient(),
        speech or FakeSpeechClient(),
        Settings(),
        speech_configured=speech_configured,
    )
    app.dependency_overrides[get_media_service] = lambda: service


def test_generate_image(app: FastAPI) -> None:
    async def _run() -> None:
        images = FakeImageClient()
        _override(app, images)
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                response = await client.post("/api/generate-image", json={"prompt": "  a red fox  "})
                assert response.status_code == 200
                body = response.json()
                assert body["image_url"] == "data:image/png;base64,aW1hZ2U="
                assert body["request_id"] == "req-1"

                response = await client.post("/api/generate-image", json={"prompt": "   "})
                assert response.status_code == 400
                assert response.json()["detail"] == "Prompt is required"

        assert images.calls == [("generate", ("a red fox",))]

    asyncio.run(_run())


def test_generate_image_surfaces_provider_failure(app: FastAPI) -> None:
    async def _run() -> None:
        _override(app, FakeImageClient(ProviderError("All image generation APIs failed", status_code=500)))
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                response = await client.post("/api/generate-image", json={"prompt": "fox"})
                assert response.status_code == 500
                assert response.json()["detail"] == "All image generation APIs failed"

    asyncio.run(_run())


def test_edit_image_validation_and_data_url_stripping(app: FastAPI) -> None:
    async def _run() -> None:
        images = FakeImageClient()
        _override(app, images)
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                response = await client.post("/api/edit-image", json={"edit_instruction": "make it blue"})
                assert response.status_code == 400
                assert response.json()["detail"] == "edit_instruction and reference_image are required"

                response = await client.post(
                    "/api/edit-image", json={"edit_instruction": "   ", "reference_image": "abc"}
                )
                assert response.json()["detail"] == "edit_instruction cannot be empty"

                response = await client.post(
                    "/api/edit-image", json={"edit_instruction": "x" * 2561, "reference_image": "abc"}
                )
                assert response.status_code == 400
                assert response.json()["detail"] == "edit_instruction cannot exceed 2560 characters"

                response = await client.post(
                    "/api/edit-image",
                    json={"edit_instruction": "make it blue", "reference_image": "data:text/plain,hello"},
                )
                assert response.status_code == 400
                assert response.json()["detail"] == "Invalid image format"

                response = await client.post(
                    "/api/edit-image",
                    json={"edit_instruction": "make it blue", "reference_image": "data:image/jpeg;base64,QUJD"},
                )
                assert response.status_code == 200

        assert images.calls == [("edit", ("make it blue", "QUJD"))]

    asyncio.run(_run())


def test_edit_image_budget_exhaustion_is_payment_required(app: FastAPI) -> None:
    async def _run() -> None:
        _override(app, FakeImageClient(BudgetExhaustedError("BUDGET_EXHAUSTED", status_code=402)))
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                response = await client.post(
                    "/api/edit-image", json={"edit_instruction": "blue", "reference_image": "QUJD"}
                )
                assert response.status_code == 402
                assert response.json()["detail"] == "All Reve API keys have exhausted their budget"

    asyncio.run(_run())


def test_remix_image_limits_reference_count(app: FastAPI) -> None:
    async def _run() -> None:
        images = FakeImageClient()
        _override(app, images)
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                response = await client.post("/api/remix-image", json={"prompt": "merge", "reference_images": []})
                assert response.json()["detail"] == "prompt and reference_images are required"

                response = await client.post(
                    "/api/remix-image", json={"prompt": "merge", "reference_images": ["QUJD"] * 7}
                )
                assert response.status_code == 400
                assert response.json()["detail"] == "reference_images must contain between 1 and 6 images"

                response = await client.post(
                    "/api/remix-image",
                    json={"prompt": "merge", "reference_images": ["data:image/png;base64,QQ==", "Qg=="]},
                )
                assert response.status_code == 200

        assert images.calls == [("remix", ("merge", ["QQ==", "Qg=="]))]

    asyncio.run(_run())


def test_transcribe_falls_back_to_second_model(app: FastAPI) -> None:
    async def _run() -> None:
        settings = Settings()
        speech = FakeSpeechClient(failing_models=[settings.speech.transcription_model])
        _override(app, speech=speech)
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                response = await client.post("/api/transcribe")
                assert response.status_code == 400
                assert response.json()["detail"] == "No audio file provided"

                response = await client.post(
                    "/api/transcribe", files={"file": ("clip.webm", b"12345", "audio/webm")}
                )
                assert response.status_code == 200
                assert response.json() == {"text": "heard 5 bytes"}

        assert speech.transcribed == [
            settings.speech.transcription_model,
            settings.speech.transcription_fallback_model,
        ]

    asyncio.run(_run())


def test_transcribe_fails_when_every_model_fails(app: FastAPI) -> None:
    async def _run() -> None:
        settings = Settings()
        speech = FakeSpeechClient(
            failing_models=[settings.speech.transcription_model, settings.speech.transcription_fallback_model]
        )
        _override(app, speech=speech)
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                response = await client.post("/api/transcribe", files={"file": ("clip.webm", b"123", "audio/webm")})
                assert response.status_code == 500
                assert response.json()["detail"] == "Failed to transcribe audio"

    asyncio.run(_run())


def test_text_to_speech(app: FastAPI) -> None:
    async def _run() -> None:
        speech = FakeSpeechClient()
        _override(app, speech=speech)
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                response = await client.post("/api/tts", json={"text": "a" * 10050})
                assert response.status_code == 200
                assert response.headers["content-type"] == "audio/wav"
                assert response.content == b"RIFF-audio"

                response = await client.post("/api/tts", json={"text": "  "})
                assert response.status_code == 400
                assert response.json()["detail"] == "Text is required"

                _override(app, speech=speech, speech_configured=False)
                response = await client.post("/api/tts", json={"text": "hello"})
                assert response.status_code == 500
                assert response.json()["detail"] == "Groq API key is not configured"

        text, voice, response_format = speech.spoken[0]
        assert len(text) == 10000
        assert response_format == "wav"

    asyncio.run(_run())
