"""Admin API routes."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..auth.dependencies import admin_required
from ..engagement.schemas import FeedbackResponse, ReportResponse
from ..infrastructure.database import User
from .dependencies import get_admin_service
from .schemas import StatusUpdate, UserAdminResponse, UserStatusUpdate
from .service import AdminService

router = APIRouter(dependencies=[Depends(admin_required())])


def _user_response(user: User) -> UserAdminResponse:
    return UserAdminResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        roles=[role.name for role in user.roles],
        is_active=user.is_active,
    )


@router.get("/users", response_model=list[UserAdminResponse])
async def list_users(service: AdminService = Depends(get_admin_service)) -> list[UserAdminResponse]:
    return [_user_response(user) for user in await service.list_users()]


@router.patch("/users/{user_id}/status", response_model=UserAdminResponse)
async def update_user_status(
    user_id: str,
    payload: UserStatusUpdate,
    service: AdminService = Depends(get_admin_service),
) -> UserAdminResponse:
    return _user_response(await service.update_user_status(user_id, payload.is_active))


@router.get("/feedback", response_model=list[FeedbackResponse])
async def list_feedback(
    status: Optional[str] = Query(default=None),
    service: AdminService = Depends(get_admin_service),
) -> list[FeedbackResponse]:
    return [FeedbackResponse.model_validate(item) for item in await service.list_feedback(status)]


@router.patch("/feedback/{feedback_id}", response_model=FeedbackResponse)
async def update_feedback(
    feedback_id: str,
    payload: StatusUpdate,
    service: AdminService = Depends(get_admin_service),
) -> FeedbackResponse:
    return FeedbackResponse.model_validate(await service.update_feedback_status(feedback_id, payload.status))


@router.get("/reports", response_model=list[ReportResponse])
async def list_reports(
    status: Optional[str] = Query(default=None),
    service: AdminService = Depends(get_admin_service),
) -> list[ReportResponse]:
    return [ReportResponse.model_validate(item) for item in await service.list_reports(status)]


@router.patch("/reports/{report_id}", response_model=ReportResponse)
async def update_report(
    report_id: str,
    payload: StatusUpdate,
    service: AdminService = Depends(get_admin_service),
) -> ReportResponse:
    return ReportResponse.model_validate(await service.update_report_status(report_id, payload.status))


__all__ = ["router"]
