"""Admin dependencies."""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session
from ..infrastructure.repositories.engagement_repo import FeedbackRepository, ReportRepository
from ..infrastructure.repositories.user_repo import UserRepository
from .service import AdminService


async def get_admin_service(session: AsyncSession = Depends(get_db_session)) -> AdminService:
    return AdminService(UserRepository(session), FeedbackRepository(session), ReportRepository(session))


__all__ = ["get_admin_service"]
