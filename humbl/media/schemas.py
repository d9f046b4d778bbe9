"""Schemas for media endpoints."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class GenerateImageRequest(BaseModel):
    prompt: str = ""


class EditImageRequest(BaseModel):
    edit_instruction: str = ""
    reference_image: str = Field(default="", description="Data URL or raw base64 image")


class RemixImageRequest(BaseModel):
    prompt: str = ""
    reference_images: list[str] = Field(default_factory=list)


class ImageResponse(BaseModel):
    image_url: str
    request_id: Optional[str] = None
    credits_used: Optional[float] = None
    credits_remaining: Optional[float] = None


class TranscriptionResponse(BaseModel):
    text: str


class SpeechRequest(BaseModel):
    text: str = ""


__all__ = [
    "GenerateImageRequest",
    "EditImageRequest",
    "RemixImageRequest",
    "ImageResponse",
    "TranscriptionResponse",
    "SpeechRequest",
]
