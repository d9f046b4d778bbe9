"""Vote, feedback and report endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status

from ..auth.dependencies import get_current_user, get_optional_user
from ..infrastructure.database import User
from .dependencies import get_engagement_service
from .schemas import (
    FeedbackCreate,
    FeedbackResponse,
    ReportCreate,
    ReportResponse,
    VoteRequest,
    VoteResponse,
)
from .service import EngagementService

router = APIRouter()


@router.post("/votes", response_model=VoteResponse)
async def cast_vote(
    payload: VoteRequest,
    user: User = Depends(get_current_user),
    service: EngagementService = Depends(get_engagement_service),
) -> VoteResponse:
    return await service.cast_vote(user.id, payload)


@router.post("/feedback", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    payload: FeedbackCreate,
    user: Optional[User] = Depends(get_optional_user),
    service: EngagementService = Depends(get_engagement_service),
) -> FeedbackResponse:
    feedback = await service.submit_feedback(user.id if user else None, payload)
    return FeedbackResponse.model_validate(feedback)


@router.post("/reports", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def file_report(
    payload: ReportCreate,
    user: User = Depends(get_current_user),
    service: EngagementService = Depends(get_engagement_service),
) -> ReportResponse:
    return ReportResponse.model_validate(await service.file_report(user.id, payload))


__all__ = ["router"]
