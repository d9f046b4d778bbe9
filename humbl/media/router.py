"""Image, transcription and text-to-speech endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, Response, UploadFile

from .dependencies import get_media_service
from .schemas import (
    EditImageRequest,
    GenerateImageRequest,
    ImageResponse,
    RemixImageRequest,
    SpeechRequest,
    TranscriptionResponse,
)
from .service import MediaService

router = APIRouter()


@router.post("/generate-image", response_model=ImageResponse)
async def generate_image(
    payload: GenerateImageRequest, service: MediaService = Depends(get_media_service)
) -> ImageResponse:
    return await service.generate_image(payload)


@router.post("/edit-image", response_model=ImageResponse)
async def edit_image(payload: EditImageRequest, service: MediaService = Depends(get_media_service)) -> ImageResponse:
    return await service.edit_image(payload)


@router.post("/remix-image", response_model=ImageResponse)
async def remix_image(
    payload: RemixImageRequest, service: MediaService = Depends(get_media_service)
) -> ImageResponse:
    return await service.remix_image(payload)


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe(
    file: UploadFile | None = File(default=None),
    service: MediaService = Depends(get_media_service),
) -> TranscriptionResponse:
    return TranscriptionResponse(text=await service.transcribe(file))


@router.post("/tts")
async def text_to_speech(payload: SpeechRequest, service: MediaService = Depends(get_media_service)) -> Response:
    audio = await service.synthesize(payload.text)
    return Response(content=audio, media_type="audio/wav")


__all__ = ["router"]
