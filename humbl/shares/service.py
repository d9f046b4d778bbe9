"""Create and resolve public message shares."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status

from ..conversations.service import ConversationService
from ..infrastructure.database import MessageRole
from ..infrastructure.repositories.conversation_repo import ConversationRepository
from ..infrastructure.repositories.share_repo import ShareRepository
from .schemas import PublicShareResponse, ShareRequest, ShareResponse

LOGGER = logging.getLogger(__name__)

SHARE_ID_PREFIX = "t_"
SHARE_TITLE_CHARS = 50


def build_share_id(conversation_id: str) -> str:
    return f"{SHARE_ID_PREFIX}{conversation_id.replace('-', '')}"


class ShareService:
    """Copy a question/answer pair into a standalone conversation anyone can read."""

    def __init__(
        self,
        conversation_repo: ConversationRepository,
        share_repo: ShareRepository,
        conversations: ConversationService,
    ) -> None:
        self.conversation_repo = conversation_repo
        self.share_repo = share_repo
        self.conversations = conversations

    async def create_share(self, user_id: str, payload: ShareRequest) -> ShareResponse:
        source = await self.conversation_repo.get_conversation(payload.conversation_id, user_id)
        if source is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")
        messages = await self.conversation_repo.list_messages(source.id)
        if payload.message_index < 0 or payload.message_index >= len(messages):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid message index")
        if messages[payload.message_index].role != MessageRole.assistant.value:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Can only share AI messages")

        # The preceding user question travels with the answer.
        shared = messages[max(0, payload.message_index - 1) :]
        excerpt = shared[0].content[:SHARE_TITLE_CHARS] or "Shared Message"
        copy = await self.conversation_repo.create_conversation(user_id, f"Shared: {excerpt}")
        await self.conversation_repo.copy_messages(copy.id, shared)
        share = await self.share_repo.create_share(build_share_id(copy.id), copy.id, payload.message_index)
        LOGGER.info("Message shared | share=%s source=%s messages=%d", share.id, source.id, len(shared))
        return ShareResponse(share_id=share.id, conversation_id=copy.id)

    async def get_public(self, share_id: str) -> PublicShareResponse:
        share = await self.share_repo.get(share_id)
        if share is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message share not found")
        conversation = await self.conversations.get_public(share.conversation_id)
        return PublicShareResponse(share_id=share.id, conversation=conversation)


__all__ = ["ShareService", "build_share_id"]
