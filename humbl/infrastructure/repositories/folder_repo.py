"""Folder repository implementation."""
from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import Conversation, Folder
from .base import AsyncRepository


class FolderRepository(AsyncRepository[Folder]):
    """Manage conversation folders."""

    model = Folder

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_for_user(self, user_id: str) -> list[Folder]:
        stmt = select(Folder).where(Folder.user_id == user_id).order_by(Folder.created_at, Folder.name)
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def create_folder(self, user_id: str, name: str) -> Folder:
        folder = Folder(user_id=user_id, name=name)
        return await self.save(folder)

    async def delete_folder(self, folder: Folder) -> None:
        """Remove the folder; its conversations become unfiled."""

        await self.session.execute(
            update(Conversation)
            .where(Conversation.folder_id == folder.id)
            .values(folder_id=None)
            .execution_options(synchronize_session=False)
        )
        await self.delete(folder)
        await self.commit()


__all__ = ["FolderRepository"]
