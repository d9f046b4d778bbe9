"""Chat streaming, titles, suggestions and daily prompts."""

from .stream import StreamEvent

__all__ = ["StreamEvent"]
