"""Schemas for message share endpoints."""
from __future__ import annotations

from pydantic import BaseModel

from ..conversations.schemas import ConversationDetail


class ShareRequest(BaseModel):
    conversation_id: str
    message_index: int


class ShareResponse(BaseModel):
    share_id: str
    conversation_id: str


class PublicShareResponse(BaseModel):
    share_id: str
    conversation: ConversationDetail


__all__ = ["ShareRequest", "ShareResponse", "PublicShareResponse"]
