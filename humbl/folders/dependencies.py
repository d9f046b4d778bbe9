"""Dependencies for the folders module."""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session
from ..infrastructure.repositories.folder_repo import FolderRepository
from .service import FolderService


async def get_folder_service(session: AsyncSession = Depends(get_db_session)) -> FolderService:
    return FolderService(FolderRepository(session))


__all__ = ["get_folder_service"]
