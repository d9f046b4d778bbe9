"""Folder service."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status

from ..infrastructure.database import Folder
from ..infrastructure.repositories.folder_repo import FolderRepository
from .schemas import MAX_FOLDER_NAME_CHARS

LOGGER = logging.getLogger(__name__)


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Folder name is required")
    if len(cleaned) > MAX_FOLDER_NAME_CHARS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Folder name cannot exceed {MAX_FOLDER_NAME_CHARS} characters",
        )
    return cleaned


class FolderService:
    def __init__(self, folder_repo: FolderRepository) -> None:
        self.folder_repo = folder_repo

    async def _require(self, folder_id: str, user_id: str) -> Folder:
        folder = await self.folder_repo.get_owned(folder_id, user_id)
        if folder is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Folder not found")
        return folder

    async def list_folders(self, user_id: str) -> list[Folder]:
        return await self.folder_repo.list_for_user(user_id)

    async def get_folder(self, folder_id: str, user_id: str) -> Folder:
        return await self._require(folder_id, user_id)

    async def create_folder(self, user_id: str, name: str) -> Folder:
        folder = await self.folder_repo.create_folder(user_id, _clean_name(name))
        LOGGER.info("Folder created | folder=%s user=%s", folder.id, user_id)
        return folder

    async def rename_folder(self, folder_id: str, user_id: str, name: str) -> Folder:
        folder = await self._require(folder_id, user_id)
        folder.name = _clean_name(name)
        return await self.folder_repo.save(folder)

    async def delete_folder(self, folder_id: str, user_id: str) -> None:
        folder = await self._require(folder_id, user_id)
        await self.folder_repo.delete_folder(folder)
        LOGGER.info("Folder deleted | folder=%s user=%s", folder_id, user_id)


__all__ = ["FolderService"]
