"""Message share repository."""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..database import MessageShare
from .base import AsyncRepository


class ShareRepository(AsyncRepository[MessageShare]):
    """Look up and record public message shares."""

    model = MessageShare

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def create_share(self, share_id: str, conversation_id: str, message_index: int) -> MessageShare:
        share = MessageShare(id=share_id, conversation_id=conversation_id, message_index=message_index)
        return await self.save(share)


__all__ = ["ShareRepository"]
