"""Media service: validation in front of the image and speech providers."""
from __future__ import annotations

import logging
import re
from time import perf_counter

from fastapi import HTTPException, UploadFile, status

from ..config import Settings
from ..exceptions import BudgetExhaustedError, ProviderError
from ..infrastructure.providers.base import ImageClient, ImageResult, SpeechClient
from .schemas import EditImageRequest, GenerateImageRequest, ImageResponse, RemixImageRequest

LOGGER = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:image/\w+;base64,(.+)$", re.DOTALL)
BUDGET_EXHAUSTED_MESSAGE = "All Reve API keys have exhausted their budget"


def _strip_data_url(image: str) -> str:
    """Return the base64 payload of an image data URL; raw base64 passes through."""

    if not image.startswith("data:"):
        return image
    match = DATA_URL_PATTERN.match(image)
    if match is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid image format")
    return match.group(1)


def _provider_failure(exc: ProviderError) -> HTTPException:
    if isinstance(exc, BudgetExhaustedError):
        return HTTPException(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=BUDGET_EXHAUSTED_MESSAGE)
    return HTTPException(status_code=exc.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def _image_response(result: ImageResult) -> ImageResponse:
    return ImageResponse(
        image_url=result.image_url,
        request_id=result.request_id,
        credits_used=result.credits_used,
        credits_remaining=result.credits_remaining,
    )


class MediaService:
    def __init__(
        self,
        images: ImageClient,
        speech: SpeechClient,
        settings: Settings,
        *,
        speech_configured: bool = True,
    ) -> None:
        self.images = images
        self.speech = speech
        self.settings = settings
        self.speech_configured = speech_configured

    async def generate_image(self, payload: GenerateImageRequest) -> ImageResponse:
        prompt = payload.prompt.strip()
        if not prompt:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt is required")
        start_time = perf_counter()
        try:
            result = await self.images.generate(prompt)
        except ProviderError as exc:
            LOGGER.error("Image generation failed | error=%s", exc)
            raise HTTPException(
                status_code=exc.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
            ) from exc
        LOGGER.info("Image generated | duration=%.2fs", perf_counter() - start_time)
        return _image_response(result)

    async def edit_image(self, payload: EditImageRequest) -> ImageResponse:
        if not payload.edit_instruction or not payload.reference_image:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="edit_instruction and reference_image are required",
            )
        instruction = payload.edit_instruction.strip()
        if not instruction:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="edit_instruction cannot be empty")
        limit = self.settings.images.max_prompt_chars
        if len(instruction) > limit:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"edit_instruction cannot exceed {limit} characters",
            )
        reference = _strip_data_url(payload.reference_image)
        try:
            result = await self.images.edit(instruction, reference)
        except ProviderError as exc:
            LOGGER.error("Image edit failed | error=%s", exc)
            raise _provider_failure(exc) from exc
        return _image_response(result)

    async def remix_image(self, payload: RemixImageRequest) -> ImageResponse:
        prompt = payload.prompt.strip()
        if not prompt or not payload.reference_images:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="prompt and reference_images are required",
            )
        limit = self.settings.images.max_reference_images
        if not 1 <= len(payload.reference_images) <= limit:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"reference_images must contain between 1 and {limit} images",
            )
        references = [_strip_data_url(image) for image in payload.reference_images]
        try:
            result = await self.images.remix(prompt, references)
        except ProviderError as exc:
            LOGGER.error("Image remix failed | images=%d error=%s", len(references), exc)
            raise _provider_failure(exc) from exc
        return _image_response(result)

    async def transcribe(self, upload: UploadFile | None) -> str:
        if upload is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No audio file provided")
        self._require_speech()
        audio = await upload.read()
        if not audio:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No audio file provided")

        speech = self.settings.speech
        filename = upload.filename or "audio.webm"
        content_type = upload.content_type or "audio/webm"
        models = [speech.transcription_model, speech.transcription_fallback_model]
        for model in models:
            try:
                text = await self.speech.transcribe(audio, filename=filename, content_type=content_type, model=model)
            except ProviderError as exc:
                LOGGER.warning("Transcription failed | model=%s error=%s", model, exc)
                continue
            LOGGER.info("Transcription complete | model=%s bytes=%d", model, len(audio))
            return text
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to transcribe audio")

    async def synthesize(self, text: str) -> bytes:
        text = text.strip()
        if not text:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Text is required")
        self._require_speech()
        speech = self.settings.speech
        try:
            return await self.speech.synthesize(
                text[: speech.max_tts_chars],
                model=speech.tts_model,
                voice=speech.tts_voice,
                response_format=speech.tts_format,
            )
        except ProviderError as exc:
            LOGGER.error("Speech synthesis failed | error=%s", exc)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to generate speech"
            ) from exc

    def _require_speech(self) -> None:
        if not self.speech_configured:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Groq API key is not configured"
            )


__all__ = ["MediaService", "DATA_URL_PATTERN"]
