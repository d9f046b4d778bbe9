"""Dependencies for the media module."""
from __future__ import annotations

from fastapi import Depends

from ..config import Settings
from ..dependencies import get_groq_client, get_image_client, get_settings
from ..infrastructure.providers.groq import GroqClient
from ..infrastructure.providers.images import ProviderImageClient
from .service import MediaService


async def get_media_service(
    images: ProviderImageClient = Depends(get_image_client),
    speech: GroqClient = Depends(get_groq_client),
    settings: Settings = Depends(get_settings),
) -> MediaService:
    return MediaService(images, speech, settings, speech_configured=speech.configured)


__all__ = ["get_media_service"]
