"""Service layer for admin endpoints."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

from fastapi import HTTPException, status

from ..infrastructure.database import Feedback, FeedbackStatus, Report, ReportStatus, User
from ..infrastructure.repositories.engagement_repo import FeedbackRepository, ReportRepository
from ..infrastructure.repositories.user_repo import UserRepository

LOGGER = logging.getLogger(__name__)


def _validate_status(value: str | None, allowed: type[Enum]) -> str | None:
    if value is None:
        return None
    normalised = value.strip().lower()
    choices = [member.value for member in allowed]
    if normalised not in choices:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid status, expected one of: {', '.join(choices)}",
        )
    return normalised


class AdminService:
    """Triage feedback and reports and manage user accounts."""

    def __init__(
        self,
        user_repo: UserRepository,
        feedback_repo: FeedbackRepository,
        report_repo: ReportRepository,
    ) -> None:
        self.user_repo = user_repo
        self.feedback_repo = feedback_repo
        self.report_repo = report_repo

    async def list_users(self) -> Sequence[User]:
        return await self.user_repo.list_by_email()

    async def update_user_status(self, user_id: str, is_active: bool) -> User:
        user = await self.user_repo.get(user_id)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        user = await self.user_repo.set_active(user, is_active)
        LOGGER.info("User status updated | user=%s active=%s", user_id, is_active)
        return user

    async def list_feedback(self, status_filter: str | None = None) -> list[Feedback]:
        return await self.feedback_repo.list_recent(status=_validate_status(status_filter, FeedbackStatus))

    async def update_feedback_status(self, feedback_id: str, new_status: str) -> Feedback:
        value = _validate_status(new_status, FeedbackStatus)
        feedback = await self.feedback_repo.get(feedback_id)
        if feedback is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Feedback not found")
        feedback.status = value
        LOGGER.info("Feedback status updated | feedback=%s status=%s", feedback_id, value)
        return await self.feedback_repo.save(feedback)

    async def list_reports(self, status_filter: str | None = None) -> list[Report]:
        return await self.report_repo.list_recent(status=_validate_status(status_filter, ReportStatus))

    async def update_report_status(self, report_id: str, new_status: str) -> Report:
        value = _validate_status(new_status, ReportStatus)
        report = await self.report_repo.get(report_id)
        if report is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
        report.status = value
        LOGGER.info("Report status updated | report=%s status=%s", report_id, value)
        return await self.report_repo.save(report)


__all__ = ["AdminService"]
