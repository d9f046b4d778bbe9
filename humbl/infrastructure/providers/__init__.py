"""External AI provider clients."""

from .base import ChatClient, ChatCompletion, ImageClient, ImageResult, SpeechClient
from .groq import GroqClient
from .images import ImageGenerationError, ProviderImageClient

__all__ = [
    "ChatClient",
    "ChatCompletion",
    "GroqClient",
    "ImageClient",
    "ImageGenerationError",
    "ImageResult",
    "ProviderImageClient",
    "SpeechClient",
]
