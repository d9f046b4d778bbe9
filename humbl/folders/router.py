"""Folder endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ..auth.dependencies import get_current_user
from ..infrastructure.database import User
from .dependencies import get_folder_service
from .schemas import FolderCreate, FolderResponse, FolderUpdate
from .service import FolderService

router = APIRouter()


@router.get("", response_model=list[FolderResponse])
async def list_folders(
    user: User = Depends(get_current_user),
    service: FolderService = Depends(get_folder_service),
) -> list[FolderResponse]:
    return [FolderResponse.model_validate(folder) for folder in await service.list_folders(user.id)]


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
async def create_folder(
    payload: FolderCreate,
    user: User = Depends(get_current_user),
    service: FolderService = Depends(get_folder_service),
) -> FolderResponse:
    return FolderResponse.model_validate(await service.create_folder(user.id, payload.name))


@router.get("/{folder_id}", response_model=FolderResponse)
async def get_folder(
    folder_id: str,
    user: User = Depends(get_current_user),
    service: FolderService = Depends(get_folder_service),
) -> FolderResponse:
    return FolderResponse.model_validate(await service.get_folder(folder_id, user.id))


@router.patch("/{folder_id}", response_model=FolderResponse)
async def rename_folder(
    folder_id: str,
    payload: FolderUpdate,
    user: User = Depends(get_current_user),
    service: FolderService = Depends(get_folder_service),
) -> FolderResponse:
    return FolderResponse.model_validate(await service.rename_folder(folder_id, user.id, payload.name))


@router.delete("/{folder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_folder(
    folder_id: str,
    user: User = Depends(get_current_user),
    service: FolderService = Depends(get_folder_service),
) -> Response:
    await service.delete_folder(folder_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
