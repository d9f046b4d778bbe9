"""Dependencies for the conversations module."""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session
from ..infrastructure.repositories.conversation_repo import ConversationRepository
from ..infrastructure.repositories.folder_repo import FolderRepository
from .service import ConversationService


async def get_conversation_service(session: AsyncSession = Depends(get_db_session)) -> ConversationService:
    return ConversationService(ConversationRepository(session), FolderRepository(session))


__all__ = ["get_conversation_service"]
