"""Conversation service: ownership checks, messages and branching."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status

from ..infrastructure.database import Conversation, Message
from ..infrastructure.repositories.conversation_repo import ConversationRepository
from ..infrastructure.repositories.folder_repo import FolderRepository
from .schemas import (
    BranchRequest,
    BranchResponse,
    ConversationDetail,
    ConversationResponse,
    ConversationUpdate,
    MessageCreate,
    MessageResponse,
)

LOGGER = logging.getLogger(__name__)

BRANCH_TITLE_CHARS = 50
BRANCH_ID_PREFIX = "WEB:"


class ConversationService:
    """Operations on conversations scoped to their owning user."""

    def __init__(self, conversation_repo: ConversationRepository, folder_repo: FolderRepository) -> None:
        self.conversation_repo = conversation_repo
        self.folder_repo = folder_repo

    async def _require(self, conversation_id: str, user_id: str) -> Conversation:
        conversation = await self.conversation_repo.get_conversation(conversation_id, user_id)
        if conversation is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")
        return conversation

    async def list_conversations(self, user_id: str, *, archived: bool = False) -> list[Conversation]:
        return await self.conversation_repo.list_for_user(user_id, archived=archived)

    async def create_conversation(self, user_id: str, title: str | None = None) -> Conversation:
        title = title.strip() if title else None
        conversation = await self.conversation_repo.create_conversation(user_id, title)
        LOGGER.info("Conversation created | conversation=%s user=%s", conversation.id, user_id)
        return conversation

    async def get_detail(self, conversation_id: str, user_id: str) -> ConversationDetail:
        conversation = await self._require(conversation_id, user_id)
        return await self._detail(conversation)

    async def get_public(self, conversation_id: str) -> ConversationDetail:
        conversation = await self.conversation_repo.get(conversation_id)
        if conversation is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")
        return await self._detail(conversation)

    async def _detail(self, conversation: Conversation) -> ConversationDetail:
        messages = await self.conversation_repo.list_messages(conversation.id)
        summary = ConversationResponse.model_validate(conversation)
        return ConversationDetail(
            **summary.model_dump(),
            messages=[MessageResponse.model_validate(message) for message in messages],
        )

    async def update_conversation(
        self, conversation_id: str, user_id: str, payload: ConversationUpdate
    ) -> Conversation:
        conversation = await self._require(conversation_id, user_id)
        provided = payload.model_fields_set
        if "title" in provided:
            title = (payload.title or "").strip()
            if not title:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title is required")
            conversation.title = title
        if "folder_id" in provided:
            if payload.folder_id is not None:
                folder = await self.folder_repo.get_owned(payload.folder_id, user_id)
                if folder is None:
                    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Folder not found")
            conversation.folder_id = payload.folder_id
        if "is_archived" in provided and payload.is_archived is not None:
            conversation.is_archived = payload.is_archived
        return await self.conversation_repo.save(conversation)

    async def archive(self, conversation_id: str, user_id: str) -> Conversation:
        conversation = await self._require(conversation_id, user_id)
        conversation.is_archived = True
        return await self.conversation_repo.save(conversation)

    async def delete_conversation(self, conversation_id: str, user_id: str) -> None:
        conversation = await self._require(conversation_id, user_id)
        await self.conversation_repo.delete_conversation(conversation)
        LOGGER.info("Conversation deleted | conversation=%s user=%s", conversation_id, user_id)

    async def list_messages(self, conversation_id: str, user_id: str) -> list[Message]:
        await self._require(conversation_id, user_id)
        return await self.conversation_repo.list_messages(conversation_id)

    async def add_message(self, conversation_id: str, user_id: str, payload: MessageCreate) -> Message:
        await self._require(conversation_id, user_id)
        message = await self.conversation_repo.add_message(
            conversation_id,
            payload.role,
            payload.content,
            images=payload.images,
            citations=[citation.model_dump() for citation in payload.citations],
            mode=payload.mode or "default",
        )
        await self.conversation_repo.commit()
        return message

    async def branch(self, user_id: str, payload: BranchRequest) -> BranchResponse:
        """Copy messages up to and including ``message_index`` into a new conversation."""

        source = await self._require(payload.conversation_id, user_id)
        messages = await self.conversation_repo.list_messages(source.id)
        if payload.message_index < 0 or payload.message_index >= len(messages):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid message index")
        branch_messages = messages[: payload.message_index + 1]
        excerpt = branch_messages[0].content[:BRANCH_TITLE_CHARS] or "Branched Conversation"
        branch = await self.conversation_repo.create_conversation(
            user_id,
            f"Branch · {excerpt}...",
            parent_conversation_id=source.id,
            parent_conversation_title=source.title,
        )
        await self.conversation_repo.copy_messages(branch.id, branch_messages)
        await self.conversation_repo.commit()
        LOGGER.info(
            "Conversation branched | source=%s branch=%s messages=%d",
            source.id,
            branch.id,
            len(branch_messages),
        )
        return BranchResponse(branch_id=f"{BRANCH_ID_PREFIX}{branch.id}", conversation_id=branch.id)


__all__ = ["ConversationService"]
