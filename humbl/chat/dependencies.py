"""Dependencies for the chat module."""
from __future__ import annotations

from fastapi import Depends

from ..config import Settings
from ..dependencies import get_groq_client, get_settings
from ..infrastructure.providers.groq import GroqClient
from .service import ChatService
from .suggestions import SuggestionClient


async def get_chat_service(
    client: GroqClient = Depends(get_groq_client),
    settings: Settings = Depends(get_settings),
) -> ChatService:
    return ChatService(client, settings, api_key_configured=client.configured)


def get_suggestion_client() -> SuggestionClient:
    return SuggestionClient()


__all__ = ["get_chat_service", "get_suggestion_client"]
