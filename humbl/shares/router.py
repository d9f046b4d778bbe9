"""Message share endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..auth.dependencies import get_current_user
from ..infrastructure.database import User
from .dependencies import get_share_service
from .schemas import PublicShareResponse, ShareRequest, ShareResponse
from .service import ShareService

router = APIRouter()


@router.post("", response_model=ShareResponse)
async def create_share(
    payload: ShareRequest,
    user: User = Depends(get_current_user),
    service: ShareService = Depends(get_share_service),
) -> ShareResponse:
    return await service.create_share(user.id, payload)


@router.get("/{share_id}/public", response_model=PublicShareResponse)
async def get_public_share(
    share_id: str,
    service: ShareService = Depends(get_share_service),
) -> PublicShareResponse:
    return await service.get_public(share_id)


__all__ = ["router"]
