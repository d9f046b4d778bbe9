"""Dependencies for the engagement module."""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session
from ..infrastructure.repositories.conversation_repo import ConversationRepository
from ..infrastructure.repositories.engagement_repo import FeedbackRepository, ReportRepository, VoteRepository
from .service import EngagementService


async def get_engagement_service(session: AsyncSession = Depends(get_db_session)) -> EngagementService:
    return EngagementService(
        ConversationRepository(session),
        VoteRepository(session),
        FeedbackRepository(session),
        ReportRepository(session),
    )


__all__ = ["get_engagement_service"]
