"""Image generation via Gemini with a Reve credential fallback chain."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from time import perf_counter
from typing import Any

import httpx

from ...config import Settings
from ...exceptions import BudgetExhaustedError, ProviderError
from .base import ImageClient, ImageResult, json_object

LOGGER = logging.getLogger(__name__)

NO_KEYS_MESSAGE = "No image generation API keys configured (GEMINI_API_KEY or REVE_API_KEY required)"
ALL_FAILED_MESSAGE = "All image generation APIs failed"
NO_REVE_KEYS_MESSAGE = "No Reve API keys configured"
BUDGET_MARKERS = ("budget", "funds")


class ImageGenerationError(ProviderError):
    """Raised when no configured image provider produced an image."""


class ProviderImageClient(ImageClient):
    """Call Gemini and Reve, falling back across credentials in order."""

    def __init__(self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings.images
        self._transport = transport

    @property
    def reve_keys(self) -> list[str]:
        return [key for key in self._settings.reve_api_keys if key]

    def _client(self) -> httpx.AsyncClient:
        timeout = httpx.Timeout(self._settings.request_timeout)
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    async def generate(self, prompt: str) -> ImageResult:
        has_gemini = bool(self._settings.gemini_api_key)
        if not has_gemini and not self.reve_keys:
            raise ImageGenerationError(NO_KEYS_MESSAGE, status_code=500)

        if has_gemini:
            try:
                return await self._generate_gemini(prompt)
            except ProviderError as exc:
                LOGGER.warning("Gemini image generation failed, trying Reve | error=%s", exc)

        payload = {
            "prompt": prompt[: self._settings.max_prompt_chars],
            "aspect_ratio": "1:1",
            "version": "latest",
        }
        try:
            return await self._with_reve_keys("image/create", payload)
        except ProviderError as exc:
            raise ImageGenerationError(ALL_FAILED_MESSAGE, status_code=500) from exc

    async def edit(self, instruction: str, reference_image: str) -> ImageResult:
        payload = {"edit_instruction": instruction, "reference_image": reference_image, "version": "latest"}
        return await self._with_reve_keys("image/edit", payload)

    async def remix(self, prompt: str, reference_images: Sequence[str]) -> ImageResult:
        payload = {
            "prompt": prompt[: self._settings.max_prompt_chars],
            "reference_images": list(reference_images),
            "aspect_ratio": "1:1",
            "version": "latest",
        }
        return await self._with_reve_keys("image/remix", payload)

    async def _generate_gemini(self, prompt: str) -> ImageResult:
        url = (
            f"{self._settings.gemini_base_url.rstrip('/')}/models/"
            f"{self._settings.gemini_model}:generateContent"
        )
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"responseModalities": ["IMAGE", "TEXT"], "imageConfig": {"imageSize": "1K"}},
        }
        start_time = perf_counter()
        try:
            async with self._client() as client:
                response = await client.post(url, params={"key": self._settings.gemini_api_key}, json=body)
        except httpx.HTTPError as exc:
            raise ProviderError(f"Failed to reach Gemini: {exc}") from exc
        if response.is_error:
            raise ProviderError(f"Gemini returned status {response.status_code}", status_code=response.status_code)
        data = json_object(response, "Gemini")
        candidates = data.get("candidates")
        first = candidates[0] if isinstance(candidates, list) and candidates else None
        content = first.get("content") if isinstance(first, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        for part in parts if isinstance(parts, list) else []:
            inline = part.get("inlineData") if isinstance(part, dict) else None
            if isinstance(inline, dict) and inline.get("data"):
                mime_type = inline.get("mimeType") or "image/png"
                LOGGER.info(
                    "Gemini image generated | model=%s duration=%.2fs",
                    self._settings.gemini_model,
                    perf_counter() - start_time,
                )
                return ImageResult(image_url=f"data:{mime_type};base64,{inline['data']}")
        raise ProviderError("Gemini returned no image data", status_code=500)

    async def _with_reve_keys(self, path: str, payload: dict[str, Any]) -> ImageResult:
        """Try each Reve key in order; budget exhaustion moves on silently."""

        keys = self.reve_keys
        if not keys:
            raise ProviderError(NO_REVE_KEYS_MESSAGE, status_code=500)
        last_error: ProviderError | None = None
        for position, key in enumerate(keys, start=1):
            try:
                return await self._call_reve(path, payload, key)
            except BudgetExhaustedError as exc:
                last_error = exc
                LOGGER.info("Reve key %d budget exhausted, trying next key | path=%s", position, path)
            except ProviderError as exc:
                last_error = exc
                LOGGER.warning("Reve key %d failed | path=%s error=%s", position, path, exc)
        assert last_error is not None
        raise last_error

    async def _call_reve(self, path: str, payload: dict[str, Any], api_key: str) -> ImageResult:
        url = f"{self._settings.reve_base_url.rstrip('/')}/{path}"
        headers = {"Authorization": f"Bearer {api_key}", "Accept": "application/json"}
        start_time = perf_counter()
        try:
            async with self._client() as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise ProviderError(f"Failed to reach Reve: {exc}", status_code=500) from exc

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = str(body.get("message") or "Unknown error") if isinstance(body, dict) else "Unknown error"
            lowered = message.lower()
            if response.status_code == 402 or any(marker in lowered for marker in BUDGET_MARKERS):
                raise BudgetExhaustedError("BUDGET_EXHAUSTED", status_code=402)
            raise ProviderError(message, status_code=response.status_code)

        result = json_object(response, "Reve")
        if result.get("content_violation"):
            raise ProviderError("Content policy violation detected", status_code=400)
        if not result.get("image"):
            raise ProviderError("No image data returned", status_code=500)
        LOGGER.info("Reve image ready | path=%s duration=%.2fs", path, perf_counter() - start_time)
        return ImageResult(
            image_url=f"data:image/png;base64,{result['image']}",
            request_id=result.get("request_id"),
            credits_used=result.get("credits_used"),
            credits_remaining=result.get("credits_remaining"),
        )


__all__ = ["ProviderImageClient", "ImageGenerationError", "ALL_FAILED_MESSAGE", "NO_KEYS_MESSAGE"]
