"""Schemas for chat endpoints."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ChatMode = Literal["default", "search", "auto", "image"]


class HistoryMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class SearchRequest(BaseModel):
    query: str = ""
    images: list[str] = Field(default_factory=list, description="Data URLs or remote image URLs")
    mode: ChatMode = "default"
    conversation_history: list[HistoryMessage] = Field(
        default_factory=list, description="Earlier turns, oldest first, excluding the current query"
    )


class GenerateTitleRequest(BaseModel):
    query: str = ""
    ai_response: str = ""


class TitleResponse(BaseModel):
    title: str


class SuggestionsResponse(BaseModel):
    suggestions: list[str]


class DailyPromptsResponse(BaseModel):
    prompts: list[str]


__all__ = [
    "ChatMode",
    "HistoryMessage",
    "SearchRequest",
    "GenerateTitleRequest",
    "TitleResponse",
    "SuggestionsResponse",
    "DailyPromptsResponse",
]
