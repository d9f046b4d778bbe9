"""Schemas for votes, feedback and reports."""
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

FEEDBACK_MIN_CHARS = 10
FEEDBACK_MAX_CHARS = 3500


class VoteRequest(BaseModel):
    conversation_id: str
    message_index: int
    vote: Literal["up", "down"]


class VoteCounts(BaseModel):
    up: int = 0
    down: int = 0


class VoteResponse(BaseModel):
    vote: int = Field(description="1 for an up vote, -1 for a down vote")
    counts: VoteCounts
    message_id: str


class FeedbackCreate(BaseModel):
    content: str = ""


class FeedbackResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    content: str
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReportCreate(BaseModel):
    conversation_id: str = ""
    category: str = ""
    sub_category: Optional[str] = None
    details: Optional[str] = None


class ReportResponse(BaseModel):
    id: str
    user_id: str
    conversation_id: str
    category: str
    sub_category: Optional[str] = None
    details: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "VoteRequest",
    "VoteCounts",
    "VoteResponse",
    "FeedbackCreate",
    "FeedbackResponse",
    "ReportCreate",
    "ReportResponse",
    "FEEDBACK_MIN_CHARS",
    "FEEDBACK_MAX_CHARS",
]
