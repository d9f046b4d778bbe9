"""Conversation repository implementation."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import Conversation, Message, MessageShare, MessageVote
from .base import AsyncRepository

DEFAULT_CONVERSATION_TITLE = "New Conversation"


class ConversationRepository(AsyncRepository[Conversation]):
    """Manage chat conversations and messages."""

    model = Conversation

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def create_conversation(
        self,
        user_id: str,
        title: str | None = None,
        *,
        parent_conversation_id: str | None = None,
        parent_conversation_title: str | None = None,
    ) -> Conversation:
        conversation = Conversation(
            user_id=user_id,
            title=title or DEFAULT_CONVERSATION_TITLE,
            parent_conversation_id=parent_conversation_id,
            parent_conversation_title=parent_conversation_title,
        )
        await self.add(conversation)
        await self.commit()
        await self.session.refresh(conversation)
        return conversation

    async def list_for_user(self, user_id: str, *, archived: bool = False) -> list[Conversation]:
        """Return the user's conversations, most recently updated first.

        Conversations created to back a message share are never listed.
        """

        shared_ids = select(MessageShare.conversation_id)
        stmt = (
            select(Conversation)
            .where(
                Conversation.user_id == user_id,
                Conversation.is_archived.is_(archived),
                Conversation.id.not_in(shared_ids),
            )
            .order_by(Conversation.updated_at.desc(), Conversation.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def get_conversation(self, conversation_id: str, user_id: str) -> Optional[Conversation]:
        return await self.get_owned(conversation_id, user_id)

    async def delete_conversation(self, conversation: Conversation) -> None:
        await self.session.execute(
            MessageVote.__table__.delete().where(MessageVote.conversation_id == conversation.id)
        )
        await self.session.execute(
            MessageShare.__table__.delete().where(MessageShare.conversation_id == conversation.id)
        )
        await self.delete(conversation)
        await self.commit()

    async def list_messages(self, conversation_id: str) -> list[Message]:
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.position, Message.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def add_message(
        self,
        conversation_id: str,
        role: str,
        content: str,
        *,
        images: list[str] | None = None,
        citations: list[dict[str, str]] | None = None,
        mode: str = "default",
    ) -> Message:
        count = await self.session.execute(
            select(func.count(Message.id)).where(Message.conversation_id == conversation_id)
        )
        message = Message(
            conversation_id=conversation_id,
            position=int(count.scalar_one()),
            role=role,
            content=content,
            images=images or None,
            citations=citations or None,
            mode=mode,
        )
        self.session.add(message)
        await self.touch(conversation_id)
        await self.session.flush()
        await self.session.refresh(message)
        return message

    async def copy_messages(self, conversation_id: str, messages: Iterable[Message]) -> int:
        """Append copies of ``messages`` to another conversation, keeping their order."""

        copied = 0
        for message in messages:
            self.session.add(
                Message(
                    conversation_id=conversation_id,
                    position=copied,
                    role=message.role,
                    content=message.content,
                    images=list(message.images) if message.images else None,
                    citations=[dict(item) for item in message.citations] if message.citations else None,
                    mode=message.mode,
                )
            )
            copied += 1
        await self.session.flush()
        return copied

    async def touch(self, conversation_id: str) -> None:
        await self.session.execute(
            update(Conversation)
            .where(Conversation.id == conversation_id)
            .values(updated_at=func.now())
            .execution_options(synchronize_session=False)
        )


__all__ = ["ConversationRepository", "DEFAULT_CONVERSATION_TITLE"]
