"""Schemas for conversation endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Citation(BaseModel):
    title: str = "Source"
    url: str = "#"


class MessageCreate(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    images: list[str] = Field(default_factory=list)
    citations: list[Citation] = Field(default_factory=list)
    mode: str = "default"


class MessageResponse(BaseModel):
    id: str
    role: str
    content: str
    images: list[str] = Field(default_factory=list)
    citations: list[Citation] = Field(default_factory=list)
    mode: str = "default"
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("images", "citations", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return value or []


class ConversationCreate(BaseModel):
    title: Optional[str] = Field(default=None, description="Defaults to 'New Conversation'")


class ConversationUpdate(BaseModel):
    """Partial update; send ``folder_id: null`` to remove the conversation from its folder."""

    title: Optional[str] = None
    folder_id: Optional[str] = None
    is_archived: Optional[bool] = None


class ConversationResponse(BaseModel):
    id: str
    title: str
    folder_id: Optional[str] = None
    is_archived: bool = False
    parent_conversation_id: Optional[str] = None
    parent_conversation_title: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ConversationDetail(ConversationResponse):
    messages: list[MessageResponse] = Field(default_factory=list)


class BranchRequest(BaseModel):
    conversation_id: str
    message_index: int


class BranchResponse(BaseModel):
    branch_id: str
    conversation_id: str


__all__ = [
    "Citation",
    "MessageCreate",
    "MessageResponse",
    "ConversationCreate",
    "ConversationUpdate",
    "ConversationResponse",
    "ConversationDetail",
    "BranchRequest",
    "BranchResponse",
]
