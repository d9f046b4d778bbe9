"""Dependencies for the shares module."""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..conversations.service import ConversationService
from ..dependencies import get_db_session
from ..infrastructure.repositories.conversation_repo import ConversationRepository
from ..infrastructure.repositories.folder_repo import FolderRepository
from ..infrastructure.repositories.share_repo import ShareRepository
from .service import ShareService


async def get_share_service(session: AsyncSession = Depends(get_db_session)) -> ShareService:
    conversation_repo = ConversationRepository(session)
    conversations = ConversationService(conversation_repo, FolderRepository(session))
    return ShareService(conversation_repo, ShareRepository(session), conversations)


__all__ = ["get_share_service"]
